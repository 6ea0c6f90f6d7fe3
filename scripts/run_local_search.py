"""Run the 2-opt + relocate local search on a CVRP instance."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"
for candidate in (SRC_ROOT, PROJECT_ROOT):
    candidate_str = str(candidate)
    if candidate_str not in sys.path:
        sys.path.insert(0, candidate_str)

from config import ImprovementPolicy, LocalSearchParams, SolverParams
from config.instance_loader import load_problem
from core.problem import Problem
from planner.construction import INITIAL_SOLUTION_BUILDERS
from planner.solver import LocalSearchSolver, SolveResult
from planner.strategy import SimpleStrategy


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("instance", type=Path, help="Instance file (.vrp CVRPLIB or .json).")
    parser.add_argument(
        "--initial",
        choices=sorted(INITIAL_SOLUTION_BUILDERS),
        default="singleton",
        help="Initial solution constructor.",
    )
    parser.add_argument(
        "--two-opt",
        choices=[policy.value for policy in ImprovementPolicy],
        default=ImprovementPolicy.BEST_IMPROVEMENT.value,
        help="Improvement policy of the intra-route 2-opt pass.",
    )
    parser.add_argument(
        "--relocate",
        choices=[policy.value for policy in ImprovementPolicy],
        default=ImprovementPolicy.BEST_IMPROVEMENT.value,
        help="Improvement policy of the inter-route relocate pass.",
    )
    parser.add_argument("--shuffle", action="store_true", help="Shuffle vehicle order every cycle.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the shuffle RNG.")
    parser.add_argument("--max-cycles", type=int, default=SolverParams().max_cycles)
    parser.add_argument("--time-limit", type=float, default=None, help="Wall-clock budget in seconds.")
    parser.add_argument("--output-json", type=Path, default=None, help="Write routes and costs here.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def _result_payload(problem: Problem, result: SolveResult) -> Dict[str, Any]:
    routes: List[List[int]] = [route.node_ids() for route in result.solution.routes()]
    return {
        "instance": problem.name,
        "initial_cost": result.initial_cost,
        "final_cost": result.final_cost,
        "cycles": result.cycles,
        "stop_reason": result.stop_reason,
        "elapsed_s": result.elapsed_s,
        "num_vehicles": len(result.solution),
        "routes": routes,
        "loads": [vehicle.load() for vehicle in result.solution],
    }


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    problem = load_problem(args.instance)
    params = LocalSearchParams(
        two_opt_policy=ImprovementPolicy.from_name(args.two_opt),
        relocate_policy=ImprovementPolicy.from_name(args.relocate),
        shuffle=args.shuffle,
        seed=args.seed,
    )
    strategy = SimpleStrategy.from_params(problem, params)
    solver = LocalSearchSolver(
        problem,
        strategy,
        SolverParams(max_cycles=args.max_cycles, time_limit_s=args.time_limit),
    )

    initial = INITIAL_SOLUTION_BUILDERS[args.initial](problem)
    result = solver.solve(initial)

    print(f"Instance:      {problem.name or args.instance.name}")
    print(f"Strategy:      {strategy}")
    print(f"Initial cost:  {result.initial_cost:.3f} ({len(initial)} vehicles)")
    print(f"Final cost:    {result.final_cost:.3f} ({len(result.solution)} vehicles)")
    print(f"Cycles:        {result.cycles} ({result.stop_reason}, {result.elapsed_s:.2f}s)")
    for vehicle in result.solution:
        print(f"  {vehicle}")

    if args.output_json is not None:
        payload = _result_payload(problem, result)
        args.output_json.write_text(json.dumps(payload, ensure_ascii=True, indent=2), encoding="utf-8")
        print(f"Wrote {args.output_json}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
