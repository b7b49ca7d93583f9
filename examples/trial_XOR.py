"""
XOR Problem Implementation for NEAT

This module implements the classic XOR (exclusive OR) problem as a benchmark
for NEAT training. XOR is not linearly separable, so a network needs at
least one hidden neuron to solve it: NEAT has to grow one.

The XOR Problem:
    Input (0, 0) → Output 0
    Input (0, 1) → Output 1
    Input (1, 0) → Output 1
    Input (1, 1) → Output 0

Score:
    The mean squared error over the four cases (lower is better).
    A trial succeeds when the error drops below 'TARGET_ERROR'.

Usage:
    Single Trial:
        python trial_XOR.py
    Several Trials:
        python trial_XOR.py --trials 20 --quiet
"""

import argparse
import logging
import random
from pathlib    import Path
from statistics import mean

import numpy as np

from evoneat import Config, NEATTraining, TrainingSetScore

XOR_INPUTS  = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])
XOR_OUTPUTS = np.array([[0.0], [1.0], [1.0], [0.0]])

TARGET_ERROR = 0.01

def run_trial(config_file: Path, max_generations: int, seed: int | None, suppress_output: bool) -> dict:
    """
    Evolve networks for XOR until one is good enough or we run out of generations.

    Returns:
        dictionary describing the outcome of the trial
    """
    config  = Config(str(config_file))
    score   = TrainingSetScore(XOR_INPUTS, XOR_OUTPUTS)
    trainer = NEATTraining.with_new_population(score,
                                               config.num_inputs,
                                               config.num_outputs,
                                               config.population_size,
                                               config,
                                               random.Random(seed))

    while trainer.error > TARGET_ERROR and trainer.iteration_number < max_generations:
        trainer.iteration()
        if not suppress_output:
            _generation_report(trainer)

    best = trainer.best_network
    if not suppress_output:
        _final_report(trainer)

    return {'success'           : trainer.error <= TARGET_ERROR,
            'error'             : trainer.error,
            'number_generations': trainer.iteration_number,
            'number_neurons'    : best.number_nodes,
            'number_links'      : best.number_links_enabled}

def _generation_report(trainer: NEATTraining):
    s  = f"GENERATION {trainer.iteration_number:04d}: "
    s += f"species = {len(trainer.population.species):3d}, "
    s += f"best error = {trainer.error:.5f}"
    print(s)

def _final_report(trainer: NEATTraining):
    network = trainer.best_network

    s  = "===============\n"
    s += f"{network!r}\n\n"
    s += f"{network}\n\n"
    s += "input         output   target  error\n"
    s += "------------------------------------\n"
    network.clear_context()
    for inputs, target in zip(XOR_INPUTS, XOR_OUTPUTS):
        output = network.compute(inputs)[0]
        s += f"{inputs.tolist()} -> {output:.4f}    {target[0]}   {abs(output - target[0]):.4f}\n"
    print(s)

    try:
        network.visualize()
        print("Network visualization saved as 'Digraph.gv.pdf'")
    except Exception as e:
        print(f"Could not visualize network: {e}")

def main():
    parser = argparse.ArgumentParser(description="Evolve XOR networks with NEAT")
    parser.add_argument("--config", type=Path, default=Path(__file__).parent / "config_xor.ini")
    parser.add_argument("--trials", type=int, default=1, help="number of independent trials")
    parser.add_argument("--generations", type=int, default=300, help="generations per trial")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--quiet", action="store_true", help="only print the trial summaries")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    results = []
    for trial_number in range(args.trials):
        seed   = None if args.seed is None else args.seed + trial_number
        result = run_trial(args.config, args.generations, seed, args.quiet)
        results.append(result)

        s  = f"Trial {trial_number:03d}: "
        s += f"error={result['error']:.4f}, "
        s += f"neurons={result['number_neurons']:2}, "
        s += f"links={result['number_links']:3}, "
        s += f"generations={result['number_generations']:3} "
        s += "[SUCCESS]" if result['success'] else "[FAILED]"
        print(s)

    successes = [result for result in results if result['success']]

    s  = "\nSUMMARY:\n"
    s += f"Total trials          = {len(results)}\n"
    s += f"Success rate          = {100 * len(successes) / len(results):.0f}%\n"
    if successes:
        s += f"Avg # neurons         = {mean(r['number_neurons'] for r in successes):.2f}\n"
        s += f"Avg # enabled links   = {mean(r['number_links'] for r in successes):.2f}\n"
        s += f"Avg # generations     = {mean(r['number_generations'] for r in successes):.0f}\n"
    else:
        s += "No successful trials - cannot compute statistics\n"
    print(s)

if __name__ == "__main__":
    main()
