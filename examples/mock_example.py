"""Example usage of DgraphClient with the in-memory mock stub.

This example demonstrates transactions, conflicts and read-only queries
without requiring a running Dgraph cluster.
"""

import asyncio

from dgraph_client import ClientConfig, DgraphClient, Mutation, TransactionAbortedError
from dgraph_client.mocks import InMemoryDgraphStore, MockDgraphStub


async def example_basic_usage():
    """Basic usage example."""
    print("=== Basic Usage Example ===")

    store = InMemoryDgraphStore()
    config = ClientConfig(default_timeout_seconds=10)

    async with DgraphClient.create(MockDgraphStub(store), config=config) as client:
        version = await client.check_version()
        print(f"Server version: {version.value}")

        async with client.new_transaction() as txn:
            result = await txn.mutate(Mutation.from_obj({"uid": "_:alice", "name": "Alice"}))
            print(f"Created uids: {result.value.uids}")
            await txn.commit()

        query = client.new_read_only_transaction()
        result = await query.query("{ q(func: has(name)) { uid name } }")
        print(f"Query result: {result.value.as_dict()}")


async def example_conflict():
    """Two transactions writing the same node."""
    print("\n=== Conflict Example ===")

    store = InMemoryDgraphStore()

    async with DgraphClient.create(MockDgraphStub(store)) as client:
        first = client.new_transaction()
        second = client.new_transaction()

        await first.mutate(Mutation.from_obj({"uid": "0x1", "balance": 10}))
        await second.mutate(Mutation.from_obj({"uid": "0x1", "balance": 20}))

        print(f"Second commit ok: {(await second.commit()).is_success}")

        result = await first.commit()
        if isinstance(result.error, TransactionAbortedError):
            print(f"First commit aborted: {result.error}")


async def example_abandoned_transaction():
    """A transaction left without commit is discarded in the background."""
    print("\n=== Abandoned Transaction Example ===")

    store = InMemoryDgraphStore()

    async with DgraphClient.create(MockDgraphStub(store)) as client:
        async with client.new_transaction() as txn:
            await txn.mutate(Mutation.from_obj({"name": "Temp"}))

    print(f"State: {txn.state.value}, aborts: {store.get_stats()['abort_count']}")


async def main():
    await example_basic_usage()
    await example_conflict()
    await example_abandoned_transaction()


if __name__ == "__main__":
    asyncio.run(main())
