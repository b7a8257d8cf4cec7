import asyncio
import sys

from chat_mirror import (
    ChatMirror,
    EnvCredentialProvider,
    MongoStore,
    Service,
    SyncStatus,
)


def print_status(status: SyncStatus) -> None:
    if status.total:
        print(f"{status.account_id}: {status.status} {status.progress}/{status.total}")
    else:
        print(f"{status.account_id}: {status.status}")


# Config and cookies are loaded from .env (CHAT_MIRROR_CREDENTIALS_CLAUDE_COOKIE, ...)
async def main(query: str) -> None:
    async with ChatMirror(
        store_class=MongoStore,
        credentials_class=EnvCredentialProvider,
    ) as mirror:
        mirror.subscribe(print_status)

        for service in Service:
            try:
                account = await mirror.detect_account(service)
            except Exception as e:
                print(f"Skipping {service}: {e}")
                continue
            await mirror.sync_account(account.id)

        # First-time accounts also start a background sync on detection
        await mirror.wait_for_background_syncs()

        for result in await mirror.search(query):
            print(f"{result.score:6.2f}  {result.chat.title}  {result.chat.url}")
            for match in result.matches:
                print(f"        {match}")


if __name__ == "__main__":
    asyncio.run(main(" ".join(sys.argv[1:]) or "refactor"))
