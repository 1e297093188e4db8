import argparse
import asyncio
import logging

from csms.client.csms_client import CsmsClient, LocalStorage
from csms.dashboard.refresh import RefreshTask
from csms.dashboard.view_model import DashboardViewModel, FallbackPolicy


def format_summary(vm: DashboardViewModel) -> str:
    s = vm.summary()
    line = (
        f"total={s['total']} normal={s['normal']} disconnected={s['disconnected']} "
        f"rate={s['operational_rate']}% updated={s['last_updated']}"
    )
    if s["fallback"]:
        line += " (fallback data)"
    return line


async def _print_summary(vm: DashboardViewModel):
    print(format_summary(vm))
    for charger in vm.filtered("disconnected"):
        print(f"  ⚠️  {charger.id} {charger.name} ({charger.location})")


async def run(args):
    storage = LocalStorage(args.storage) if args.storage else None
    async with CsmsClient(args.base_url, storage=storage) as client:
        if args.username:
            await client.login(args.username, args.password or "")
        vm = DashboardViewModel(client, fallback_policy=FallbackPolicy(args.fallback))
        if args.city:
            vm.set_filter("city", args.city)
        async with RefreshTask(vm, interval_seconds=args.interval, on_refresh=_print_summary):
            await asyncio.Event().wait()


def main():
    p = argparse.ArgumentParser(description="Terminal monitor for charger status")
    p.add_argument("--base-url", default=None, help="API base URL (CSMS_API_BASE_URL)")
    p.add_argument("--username")
    p.add_argument("--password")
    p.add_argument("--storage", help="token storage file (CSMS_STORAGE_PATH)")
    p.add_argument("--interval", type=int, default=900, help="seconds between refreshes")
    p.add_argument("--fallback", choices=[policy.value for policy in FallbackPolicy], default="fixtures")
    p.add_argument("--city", help="only show stations whose location contains this text")
    args = p.parse_args()

    logging.basicConfig(level=logging.WARNING)
    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        print("Monitor stopped")


if __name__ == "__main__":
    main()
