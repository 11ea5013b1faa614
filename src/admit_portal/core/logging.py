import logging
import sys

logger = logging.getLogger("admit_portal")


def configure_logging(level: str = "INFO") -> None:
    """
    Configure logging for the whole app.
    Call this once before the application starts serving.
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def mask_email(email: str) -> str:
    """Mask an email for logs: john.doe@example.com -> j***e@example.com."""
    if not email or "@" not in email:
        return "***"
    local, domain = email.split("@", 1)
    if len(local) <= 2:
        masked_local = local[0] + "***"
    else:
        masked_local = local[0] + "***" + local[-1]
    return f"{masked_local}@{domain}"
