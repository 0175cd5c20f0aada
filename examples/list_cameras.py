#!/usr/bin/env python3

"""
Example script listing the locations and cameras of a Ring account, then
printing the dings and status changes received while polling.

Reads credentials (RING_USERNAME, RING_PASSWORD) from environment variables.
RING_2FA_CODE can hold the two-factor code Ring sent on the previous attempt.

Usage:
  export RING_USERNAME="your_email"
  export RING_PASSWORD="your_password"
  python3 list_cameras.py --location-id <location_id> --minutes 5
"""

import argparse
import asyncio
import logging
import os
import sys

from pyring import (
    ApiError,
    AuthError,
    AuthHandler,
    RingApi,
    TopologyError,
    TwoFactorAuthRequired,
)

# --- Configuration ---
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)

USERNAME = os.getenv("RING_USERNAME")
PASSWORD = os.getenv("RING_PASSWORD")
TWO_FACTOR_CODE = os.getenv("RING_2FA_CODE")

if not all([USERNAME, PASSWORD]):
    logging.error("Please set RING_USERNAME and RING_PASSWORD environment variables.")
    sys.exit(1)

# --- Argument Parsing ---
parser = argparse.ArgumentParser(description="List Ring cameras and watch dings.")
parser.add_argument(
    "--location-id",
    action="append",
    dest="location_ids",
    help="Only use this location (can be repeated).",
)
parser.add_argument(
    "--minutes", type=float, default=1, help="How long to watch for updates."
)
args = parser.parse_args()


# --- Main Async Function ---
async def main():
    """Run the async listing script."""
    auth = AuthHandler(USERNAME, PASSWORD, two_factor_code=TWO_FACTOR_CODE)
    try:
        api = RingApi(
            auth,
            location_ids=args.location_ids,
            camera_status_polling_seconds=20,
            camera_dings_polling_seconds=2,
        )

        # Sign in first so a two-factor prompt is not reported as a topology error
        await auth.get_access_token()
        locations = await api.get_locations()
        for location in locations:
            logging.info(
                f"Location '{location.name}' ({location.location_id}), "
                f"has hubs: {location.has_hubs}"
            )
            for camera in location.cameras:
                logging.info(
                    f"  Camera {camera.id}: '{camera.name}' ({camera.model}), "
                    f"battery: {camera.battery_level}, offline: {camera.is_offline}"
                )
                camera.add_ding_listener(
                    lambda ding, camera=camera: logging.info(
                        f"New {ding.kind} ding on '{camera.name}'"
                    )
                )
                camera.add_data_listener(
                    lambda data, camera=camera: logging.info(
                        f"Status of '{camera.name}' refreshed"
                    )
                )

        history = await api.get_history(limit=5)
        logging.info(f"Last {len(history)} events: {[e.get('kind') for e in history]}")

        await asyncio.sleep(args.minutes * 60)

    except TwoFactorAuthRequired as e:
        logging.error(f"{e}. Set RING_2FA_CODE and run again.")
    except TopologyError as e:
        logging.error(f"Could not load the account: {e} (cause: {e.__cause__})")
    except AuthError as e:
        logging.error(f"Authentication Error: {e}")
    except ApiError as e:
        logging.error(f"API Error: Status={e.status_code}, Message={e.error_message}")
    finally:
        if auth.refresh_token:
            logging.info("Refresh token for next time: %s...", auth.refresh_token[:10])
        await auth.close_session()
        logging.info("Auth session closed.")


if __name__ == "__main__":
    asyncio.run(main())
