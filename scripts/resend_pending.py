import sys
import os
import argparse

# Add the project root directory to Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlmodel import Session

from app.config import get_external_service_config
from app.database import engine
from app.services.delivery import ExternalDeliveryService
from app.tasks.redelivery import resend_pending_submissions


def main():
    parser = argparse.ArgumentParser(description="Resend submissions the external service never accepted")
    parser.add_argument("--limit", type=int, default=None, help="Maximum number of submissions to resend")
    args = parser.parse_args()

    with Session(engine) as session:
        delivery = ExternalDeliveryService(session, get_external_service_config())
        summary = resend_pending_submissions(session, delivery, limit=args.limit)

    print(f"Attempted {summary.attempted}, delivered {summary.delivered}, failed {summary.failed}")
    return 0 if summary.failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
