"""
Persist — resources that survive a restart.

Level 3: reservoir.resource
Level 2: reservoir.persist (Storage + Codec + Persisted)
Level 1: SQLAlchemy / files / memory
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from reservoir import persist as P
from reservoir import resource as R
from examples._infra import banner, run


calls = 0


async def exchange_rate(base: str, quote: str) -> float:
    global calls
    calls += 1
    print(f"  [ORIGIN] Loading {base}/{quote}...")
    return {"USD": 1.0, "EUR": 1.08}[base] / {"USD": 1.0, "EUR": 1.08}[quote]


def build(storage: P.Storage) -> R.KeyedResource[float]:
    return R.keyed(exchange_rate, arity=2).persist("fx", storage).build()


async def main() -> None:
    banner("Persist: hydrate from durable storage")

    engine = create_engine("sqlite://")
    P.create_tables(engine)
    storage = P.SQLAlchemyStorage(sessionmaker(engine))

    print("\n1. First process:")
    rates = build(storage)
    print(f"   EUR/USD = {await rates.fetch('EUR', 'USD'):.2f}")

    print("\n2. 'Restarted' process reads the snapshot:")
    rates = build(storage)
    print(f"   EUR/USD = {await rates.fetch('EUR', 'USD'):.2f} (producer calls: {calls})")

    print("\n3. Simple values persist too:")
    theme = R.simple("light").persist("theme", storage).build()
    theme.set("dark")
    print(f"   after restart: {R.simple('light').persist('theme', storage).build().read()}")

    print("\nDone!")


if __name__ == "__main__":
    run(main)
