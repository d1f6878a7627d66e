"""Example: drive the service layer without Flask.

Resolves one typed code against the configured backend and prints the
feedback plus today's visit summary for the branch.
"""

import importlib
import sys

from config import get_settings_module

from src.gym_frontdesk.gym_frontdesk.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        api_config=settings.API_CONFIG,
        token_provider=lambda: settings.API_TOKEN,
        timezone_name=settings.BUSINESS_TIMEZONE,
    )
    branch_id = settings.BRANCH_ID

    if len(sys.argv) > 1:
        fb = container.checkin_service.resolve(sys.argv[1], branch_id=branch_id, terminal_id="cli")
        print(f"check-{fb.action.value} {fb.code} {fb.identity.full_name}")

    snap = container.visit_feeds.for_branch(branch_id).snapshot()
    print(snap["state"], snap["total_visits"], snap["trend"])


if __name__ == "__main__":
    main()
