from time import sleep, perf_counter
from lazy import LazyIterator


def expensive_transform(x, index):
    # Simulate a costly step so laziness is visible
    print(f"  computing f({x}) at index {index} ...")
    sleep(0.2)  # pretend this is expensive
    return x * x


print("\n--- Demo: laziness (no work until consumed) ---")
data = range(1, 10_000)  # big-ish source
pipeline = (
    LazyIterator(data)
    .map(expensive_transform)   # expensive; watch when it runs
    .filter(lambda v, i: v % 2 == 0)
)

print("Constructed pipeline. No output yet (nothing computed).")
print("\nFinding the first square above 50 (computes only up to the match):")
t0 = perf_counter()
hit = pipeline.find(lambda v, i: v > 50)
t1 = perf_counter()
print(f"Result: {hit}")
print(f"Time: {t1 - t0:.2f}s\n")

print("--- Demo: filter indices count the source ---")
LazyIterator([10, 20, 30, 40]).filter(lambda v, i: i % 2 == 1).for_each(
    lambda v, i: print(f"  kept {v}")
)
print()

print("--- Demo: flatten depth ---")
nested = [1, [2, [3, [4]]]]
for depth in range(3):
    print(f"  flat({depth}): {LazyIterator(nested).flat(depth).into_list()}")
print()

print("--- Demo: dedupe (keep first, then merge) ---")
records = [
    {"id": 1, "v": "a"},
    {"id": 2, "v": "b"},
    {"id": 1, "v": "c"},
]
print("  keep first:", LazyIterator(records).dedupe(lambda r: r["id"]).into_list())
print("  merge:     ", LazyIterator(records).dedupe(
    lambda r: r["id"], lambda old, new: {**old, "v": old["v"] + new["v"]}
).into_list())
print()

print("--- Demo: sinks ---")
pairs = [("a", 1), ("b", 2), (3, "c")]
print("  into_dict:  ", LazyIterator(pairs).into_dict())
print("  into_record:", LazyIterator(pairs).into_record())

print("\n--- Demo: single-pass sources stay single-pass ---")
one_shot = LazyIterator(x for x in range(5))
print(f"  first count: {one_shot.count()}")
print(f"  second count: {one_shot.count()}")
