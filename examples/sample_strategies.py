"""Sample steps with each strategy.

Demonstrates: reservoir, percentage, grouped.
"""

from loguru import logger

from datasample import Sample, Sink, Source, blake2b_hash

data = [f"event-{i}" for i in range(1, 31)]
source = Source.list(data)

# Exactly 5 records, uniform without replacement
r_res = (source >> Sample.reservoir(5, seed=42) >> Sink.list()).run()
logger.info(f"reservoir(5): {r_res}")

# Each record kept with a 20% chance, streaming
r_pct = (source >> Sample.percentage(20, seed=42) >> Sink.list()).run()
logger.info(f"percentage(20): {len(r_pct)} records: {r_pct}")

# Grouped: every row of a kept user is kept
rows = [["user", "action"]] + [
    [f"user{i % 6}", ["view", "click", "buy"][i % 3]] for i in range(30)
]
r_grp = (
    Source.list(rows)
    >> Sample.grouped("user", 50, hasher=blake2b_hash)
    >> Sink.list()
).run()
users = sorted({row[0] for row in r_grp[1:]})
logger.info(f"grouped(user, 50): header={r_grp[0]} users={users} rows={len(r_grp) - 1}")
