import logging

from hoaxify.services.cleanup_worker import run_all


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    res = run_all()
    print(res)


if __name__ == "__main__":
    main()
