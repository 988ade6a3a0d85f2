import asyncio
import logging
import sys

from config import config
from converter.batch import convert_reports


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run() -> int:
    # Validate converter configuration
    config_errors = config.validate()
    if config_errors:
        print("\033[31m[ERROR] Configuration validation failed:\033[0m")
        for error in config_errors:
            print(f"  - {error}")
        return 1

    configure_logging(config.LOG_LEVEL)

    if not asyncio.run(convert_reports()):
        logging.getLogger("dmarc_to_html").critical(
            f"DMARC report generation failed; error page written to {config.OUTPUT_HTML}"
        )
        return 1

    print("\033[32m%s\033[0m" % "HTML report has been created.")
    return 0


if __name__ == "__main__":
    sys.exit(run())
