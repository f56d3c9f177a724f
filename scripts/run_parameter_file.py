"""
Renormalize the parameter points of an input file.

For every selected line the model is set up, its counterterms are fixed
from the one-loop Coleman-Weinberg potential and the mass-basis triple
couplings are computed. Results are written as a tab-separated table:
input parameters, counterterms, then Tree/CT/CW triple couplings.
"""

import time
from tabulate import tabulate

from curvature_solver.models import available_models, create_model
from curvature_solver.reporting.parameter_io import write_results_table
from curvature_solver.reporting.results_reporter import format_triple_couplings
from curvature_solver.scan.point_processor import output_legend, process_parameter_file


def run(model_id, input_path, output_path, lines=None, triple_couplings=True, verbose=False):
    """Process the file and write the results table."""
    start_time = time.time()
    results = process_parameter_file(
        model_id,
        input_path,
        lines=lines,
        triple_couplings=triple_couplings,
        verbose=verbose,
    )
    model = create_model(model_id)
    legend = output_legend(model, triple_couplings=triple_couplings)
    good = [r for r in results if r.ok]
    written = write_results_table(output_path, legend, [r.output_row() for r in good])

    table_data = [
        [r.line, r.status.value, r.stage or "", r.message]
        for r in results
    ]
    print(tabulate(table_data, headers=["Line", "Status", "Stage", "Message"], tablefmt='grid'))
    print(f"\n{written} of {len(results)} points written to {output_path} "
          f"({time.time() - start_time:.1f} s)")

    if verbose and triple_couplings:
        for r in good:
            print(f"\nTriple couplings, line {r.line}:")
            print(format_triple_couplings(r.triple_couplings, model.particle_labels, atol=1e-8))
    return results


if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(
        description='Compute counterterms and triple couplings for a parameter file',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES:
---------
  # All points of a file
  python scripts/run_parameter_file.py vdm points.tsv results.tsv

  # Only line 2, with diagnostic output
  python scripts/run_parameter_file.py vdm points.tsv results.tsv --line 2 --verbose
        """
    )
    parser.add_argument('model', choices=available_models(), help='Model identifier')
    parser.add_argument('input', help='Parameter file (legend on the first line)')
    parser.add_argument('output', help='Output table')
    parser.add_argument('--line', type=int, action='append', default=None,
                        help='Line number to process (repeatable; default: all lines)')
    parser.add_argument('--no-triple', action='store_true',
                        help='Skip the triple-coupling computation')
    parser.add_argument('--verbose', action='store_true',
                        help='Print model summaries and coupling tables')

    args = parser.parse_args()
    run(
        args.model,
        args.input,
        args.output,
        lines=args.line,
        triple_couplings=not args.no_triple,
        verbose=args.verbose,
    )
