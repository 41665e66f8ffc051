"""Watch the Resend verification status of the sender domain.

Run: python3 backend/scripts/check_domain.py [domain] [--interval MINUTES]

Checks immediately, then every ``interval`` minutes, and exits once the
domain reports ``verified``.
"""

import argparse
import asyncio
import sys
from datetime import datetime
from pathlib import Path

# Add backend/ to path so `booking_mailer` is importable from scripts/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from booking_mailer.config import settings
from booking_mailer.services.mail_transport import ResendAPIError, ResendTransport

DEFAULT_DOMAIN = settings.from_email.rpartition("@")[2]


async def check_once(resend: ResendTransport, domain: str) -> bool:
    """Print the domain's status. Returns True once it is verified."""
    print(f"[{datetime.now():%H:%M:%S}] Checking verification status for: {domain}...")
    domains = await resend.list_domains()
    target = next((d for d in domains if d.get("name") == domain), None)

    if target is None:
        print(f"Domain '{domain}' not found in your Resend account.")
        print("Please ensure you have added it on https://resend.com/domains")
        return False

    print("-" * 41)
    print(f"  Domain: {target.get('name')}")
    print(f"  Status: {str(target.get('status', 'unknown')).upper()}")
    print(f"  Region: {target.get('region')}")
    print("-" * 41)
    return target.get("status") == "verified"


async def main(domain: str, interval_minutes: float) -> int:
    if not settings.resend_api_key:
        print("FATAL: RESEND_API_KEY is not set in your .env file. Aborting.", file=sys.stderr)
        return 1

    async with ResendTransport(settings.resend_api_key, base_url=settings.resend_api_url) as resend:
        while True:
            try:
                if await check_once(resend, domain):
                    print(f"\nSuccess! The domain is now verified. You can now send emails from @{domain}.")
                    return 0
            except ResendAPIError as e:
                print(f"Error fetching domains from Resend: {e}", file=sys.stderr)

            print(f"\nVerification is still pending. The next check will be in {interval_minutes:g} minutes.")
            await asyncio.sleep(interval_minutes * 60)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("domain", nargs="?", default=DEFAULT_DOMAIN)
    parser.add_argument("--interval", type=float, default=10, help="minutes between checks")
    args = parser.parse_args()
    try:
        sys.exit(asyncio.run(main(args.domain, args.interval)))
    except KeyboardInterrupt:
        sys.exit(130)
