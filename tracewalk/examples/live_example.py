"""
Drive a walker from an asyncio event loop, the way a test harness would: a producer
fires events on its own schedule and the harness awaits the single outcome.
"""
import asyncio
import logging

from tracewalk.core import (
    DelayedFailure,
    Event,
    ExactOrigin,
    TraceWalker,
    UnmatchedTrace,
    WalkerConfig,
)
from tracewalk.scenarios import SCRIPT_LOADER_TREE


async def produce(walker: TraceWalker, events, gap: float = 0.01) -> None:
    for e in events:
        await asyncio.sleep(gap)
        walker.observe(e)


async def run(events) -> None:
    walker = TraceWalker(
        SCRIPT_LOADER_TREE,
        config=WalkerConfig(
            failure_policy=DelayedFailure(window=0.5),
            origin_filter=ExactOrigin("watchme"),
        ),
    )
    producer = asyncio.create_task(produce(walker, events))
    try:
        label = await asyncio.wait_for(walker.completion.wait(), timeout=5.0)
        print(f"matched: {label}")
    except UnmatchedTrace as e:
        print(f"unmatched: {list(e.trace)}")
    finally:
        await producer


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    asyncio.run(run([
        Event("ping", origin="window"),
        Event("scriptloader_load_source", origin="watchme"),
        Event("scriptloader_encode_and_execute", origin="watchme"),
        Event("scriptloader_bytecode_saved", origin="watchme"),
    ]))
    asyncio.run(run([
        Event("scriptloader_load_bytecode", origin="watchme"),
        Event("scriptloader_generate_bytecode", origin="watchme"),
    ]))


if __name__ == "__main__":
    main()
