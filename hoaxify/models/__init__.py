from hoaxify.models.user import User
from hoaxify.models.token import Token
from hoaxify.models.hoax import Hoax
from hoaxify.models.file_attachment import FileAttachment

__all__ = ["User", "Token", "Hoax", "FileAttachment"]
