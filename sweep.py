#!/usr/bin/env python3
"""
Parameter sweep for the AMR warehouse simulation.

Runs run_headless() across combinations of fleet size and collision
avoidance, reports throughput metrics, and optionally writes CSV output.

Usage:
    python sweep.py
    python sweep.py --amrs 1,3,5 --duration 600 --seed 7
    python sweep.py --csv results.csv --parallel
"""
import argparse
import csv
import logging
import multiprocessing

from amr_simulation import run_headless, load_settings


def _run_single(args):
    """Wrapper for multiprocessing: unpack args and call run_headless."""
    num_amrs, collision, duration, tick_ms, speed, seed = args
    return run_headless(
        num_amrs=num_amrs,
        sim_duration_s=duration,
        tick_ms=tick_ms,
        speed=speed,
        seed=seed,
        collision_avoidance=collision,
    )


def _parse_counts(text):
    return [int(x.strip()) for x in text.split(",") if x.strip()]


def main(argv=None):
    cfg = load_settings()
    parser = argparse.ArgumentParser(description="AMR simulation parameter sweep")
    parser.add_argument("--duration", type=float, default=cfg.duration_s,
                        help="Simulation duration in sim-seconds (default: %(default)s)")
    parser.add_argument("--tick-ms", type=float, default=cfg.tick_ms,
                        help="Logical tick length in ms (default: %(default)s)")
    parser.add_argument("--speed", type=float, default=cfg.speed,
                        help="Movement speed multiplier (default: %(default)s)")
    parser.add_argument("--seed", type=int, default=cfg.seed,
                        help="Seed for cargo weights (default: random)")
    parser.add_argument("--amrs", type=str, default="1,2,3,5",
                        help="Comma-separated list of fleet sizes to sweep")
    parser.add_argument("--collision", choices=("on", "off", "both"), default="both",
                        help="Collision avoidance setting(s) to sweep")
    parser.add_argument("--csv", type=str, default=None,
                        help="Optional CSV output file path")
    parser.add_argument("--parallel", action="store_true",
                        help="Run sweep using multiprocessing")
    parser.add_argument("--workers", type=int, default=None,
                        help="Number of parallel workers (default: cpu_count, capped at 8)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(message)s")

    amr_counts = _parse_counts(args.amrs)
    collisions = {"on": [True], "off": [False], "both": [False, True]}[args.collision]

    combos = [
        (n, c, args.duration, args.tick_ms, args.speed, args.seed)
        for n in amr_counts for c in collisions
    ]
    total = len(combos)

    print(f"Sweep: {len(amr_counts)} fleet sizes x {len(collisions)} collision settings = {total} runs")
    print(f"Duration: {args.duration:.0f}s, tick: {args.tick_ms}ms, speed: {args.speed}x")

    results = []

    if args.parallel:
        n_workers = args.workers or min(multiprocessing.cpu_count(), 8)
        print(f"Mode: parallel ({n_workers} workers)\n")
        with multiprocessing.Pool(processes=n_workers) as pool:
            for i, result in enumerate(pool.imap_unordered(_run_single, combos), 1):
                results.append(result)
                print(f"  [{i}/{total}] AMRs={result['num_amrs']:>2}  "
                      f"Collision={'on' if result['collision_avoidance'] else 'off':>3}  "
                      f"Tasks={result['total_tasks_completed']:>4}  "
                      f"Wall={result['wall_clock_seconds']:.1f}s")
    else:
        print("Mode: serial\n")
        for i, combo in enumerate(combos, 1):
            print(f"  [{i}/{total}] AMRs={combo[0]}, Collision={'on' if combo[1] else 'off'} ...",
                  end="", flush=True)
            result = _run_single(combo)
            results.append(result)
            print(f"  Tasks={result['total_tasks_completed']:>4}  "
                  f"Wall={result['wall_clock_seconds']:.1f}s")

    results.sort(key=lambda r: (r["num_amrs"], r["collision_avoidance"]))

    print()
    header = f"{'AMRs':>5}  {'Coll':>4}  {'Tasks':>5}  {'Fail':>4}  {'Task/hr':>7}  " \
             f"{'AvgTask':>8}  {'Util%':>6}  {'Block%':>7}  {'Wall(s)':>8}"
    print(header)
    print("-" * len(header))

    best = None
    for r in results:
        print(f"{r['num_amrs']:>5}  {'on' if r['collision_avoidance'] else 'off':>4}  "
              f"{r['total_tasks_completed']:>5}  "
              f"{r['total_tasks_failed']:>4}  "
              f"{r['throughput_per_hour']:>7.1f}  "
              f"{r['average_task_completion_time_ms'] / 1000.0:>7.1f}s  "
              f"{r['amr_utilization']*100:>5.1f}%  "
              f"{r['amr_blocked_fraction']*100:>6.1f}%  "
              f"{r['wall_clock_seconds']:>7.1f}")
        if best is None or r["throughput_per_hour"] > best["throughput_per_hour"]:
            best = r

    if best:
        print(f"\nBest throughput: {best['throughput_per_hour']:.1f} tasks/hr "
              f"with {best['num_amrs']} AMRs, collision avoidance "
              f"{'on' if best['collision_avoidance'] else 'off'}")

    if args.csv:
        fieldnames = [
            "num_amrs", "collision_avoidance", "speed",
            "total_tasks_completed", "total_tasks_failed", "total_cargo_moved",
            "throughput_per_hour", "average_task_completion_time_ms",
            "system_efficiency", "amr_utilization", "amr_blocked_fraction",
            "distance_traveled", "sim_time_ms", "wall_clock_seconds", "total_ticks",
        ]
        with open(args.csv, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for r in results:
                writer.writerow({k: r[k] for k in fieldnames})
        print(f"\nCSV written to: {args.csv}")

    return results


if __name__ == "__main__":
    main()
