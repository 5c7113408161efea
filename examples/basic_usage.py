"""
Basic usage example for tlssig.

Issues a user signature, rotates the key, and inspects tokens with the
local verifier.
"""

import logging
import sys
from datetime import timedelta
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tlssig import Signer, TimeUnit, Verifier, decode_token

SDKAPPID = 1400000000
SECRET = "5bd2850fff3ecb11d7c805251c51ee463a25727bddc2385f3fa8bfee1bb93b5e"


def main() -> None:
    """Demonstrate basic tlssig usage."""
    # Show the pipeline's DEBUG diagnostics (canonical message, record)
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    signer = Signer(SDKAPPID, SECRET)
    verifier = Verifier(SDKAPPID, SECRET)

    token = signer.sign("10086", timedelta(hours=2), user_payload="room=7")
    print(f"token: {token}")
    print(f"record: {decode_token(token)}")
    print(f"valid: {verifier.check(token, identifier='10086')}")

    # Rotate the key; old tokens stay tied to the old key
    signer.update_key("a-freshly-rotated-key")
    rotated = signer.sign("10086", timedelta(hours=2))
    report = verifier.verify(rotated)
    print(f"rotated token valid with old key: {report.valid} {report.error_types}")

    # Verifiers that expect millisecond timestamps
    millis = Signer(SDKAPPID, SECRET, time_unit=TimeUnit.MILLISECONDS)
    print(f"millisecond record: {decode_token(millis.sign('10086', 3600))}")


if __name__ == "__main__":
    main()
