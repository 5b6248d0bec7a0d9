"""
Resource — declarative async memoization.

Key concepts:
- Producer = async function of the key tuple (raises on failure)
- Resource = remembers EMPTY / SUCCESS / ERROR per key tuple
- fetch() awaits, read() never blocks (Ready | Failed | Pending)
"""

from kungfu import Ok, Error
from reservoir import resource as R
from examples._infra import banner, run, User, NotFound, FakeDb


db = FakeDb()


async def fetch_user(user_id: int) -> User:
    print(f"  [ORIGIN] Fetching user {user_id} from DB...")
    return await db.get_user(user_id)


users = R.keyed(fetch_user, arity=1).build()


async def main() -> None:
    banner("Resource: fetch / read / clear")

    print("\n1. First fetch (EMPTY → producer runs):")
    alice = await users.fetch(1)
    print(f"   {alice.name} status={users.status(1).name}")

    print("\n2. Second fetch (SUCCESS → cached, no DB query):")
    alice = await users.fetch(1)
    print(f"   {alice.name} queries={db.queries}")

    print("\n3. Missing user (ERROR is cached too):")
    for _ in range(2):
        match await users.attempt(99):
            case Ok(user):
                print(f"   {user.name}")
            case Error(e):
                print(f"   error: {e} queries={db.queries}")

    print("\n4. Suspense-style read:")
    match users.read(2):
        case R.Pending() as pending:
            print("   pending... awaiting settlement")
            await pending
    match users.read(2):
        case R.Ready(user):
            print(f"   ready: {user.name}")
        case R.Failed(e):
            print(f"   failed: {e}")

    print("\n5. Clear and refetch:")
    users.clear(1)
    await users.fetch(1)
    print(f"   queries={db.queries}")

    try:
        await users.fetch(99)
    except NotFound as e:
        print(f"\n6. fetch() re-raises the same exception: {e}")

    print("\nDone!")


if __name__ == "__main__":
    run(main)
