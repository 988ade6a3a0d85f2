import logging
import os


class Config:
    """Centralized configuration for the DMARC report converter"""

    # Input / Output
    REPORTS_DIR: str = os.getenv("DMARC_REPORTS_DIR", "./report")
    OUTPUT_HTML: str = os.getenv("DMARC_OUTPUT_HTML", "./report.html")

    # Processing Limits
    BATCH_SIZE: int = int(os.getenv("DMARC_BATCH_SIZE", "5"))
    STREAM_THRESHOLD_MB: int = int(os.getenv("DMARC_STREAM_THRESHOLD_MB", "10"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def stream_threshold_bytes(self) -> int:
        return self.STREAM_THRESHOLD_MB * 1024 * 1024

    @classmethod
    def validate(cls) -> list[str]:
        """Validates configuration values and returns list of errors"""
        errors = []
        if not cls.REPORTS_DIR:
            errors.append("DMARC_REPORTS_DIR must not be empty")
        if not cls.OUTPUT_HTML:
            errors.append("DMARC_OUTPUT_HTML must not be empty")
        if cls.BATCH_SIZE < 1:
            errors.append(f"DMARC_BATCH_SIZE must be at least 1 (got {cls.BATCH_SIZE})")
        if cls.STREAM_THRESHOLD_MB < 0:
            errors.append(
                f"DMARC_STREAM_THRESHOLD_MB must not be negative (got {cls.STREAM_THRESHOLD_MB})"
            )
        if not isinstance(logging.getLevelName(cls.LOG_LEVEL), int):
            errors.append(f"LOG_LEVEL '{cls.LOG_LEVEL}' is not a valid logging level")
        return errors

config = Config()
