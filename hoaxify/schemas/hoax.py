from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hoaxify.models.hoax import Hoax
from hoaxify.schemas.user import user_out
from hoaxify.services.tokens import to_millis


class HoaxCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: Optional[str] = None
    file_attachment: Optional[int] = Field(default=None, alias="fileAttachment")


def hoax_out(hoax: Hoax) -> dict:
    out = {
        "id": hoax.id,
        "content": hoax.content,
        "timestamp": to_millis(hoax.timestamp),
        "user": user_out(hoax.user),
    }
    if hoax.file_attachment is not None:
        out["fileAttachment"] = {
            "filename": hoax.file_attachment.filename,
            "fileType": hoax.file_attachment.file_type,
        }
    return out
