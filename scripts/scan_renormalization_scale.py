"""
Counterterms as a function of the renormalization scale.

Sets up one parameter point, then varies the scale over
(0.5 + step/steps) * v_0 and re-derives the counterterms at each step.
Optionally plots each counterterm against the scale.
"""

from tabulate import tabulate

from curvature_solver.models import available_models, create_model
from curvature_solver.reporting.parameter_io import read_parameter_file, write_results_table
from curvature_solver.scan.point_processor import scale_scan_legend, scan_renormalization_scale


def plot_scan(model, steps, output_path):
    """Plot every counterterm against the scale."""
    import matplotlib.pyplot as plt

    names = model.legend_ct()
    scales = [s.scale for s in steps]
    n_cols = 3
    n_rows = (len(names) + n_cols - 1) // n_cols
    fig, axes = plt.subplots(n_rows, n_cols, figsize=(14, 3.5 * n_rows))
    for ax, name in zip(axes.flat, names):
        ax.plot(scales, [s.counterterms[name] for s in steps], 'o-')
        ax.set_xlabel('mu (GeV)')
        ax.set_title(name)
        ax.grid(True, alpha=0.3)
    for ax in list(axes.flat)[len(names):]:
        ax.set_visible(False)
    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    print(f"Plot saved to {output_path}")


def run(model_id, input_path, output_path, line, n_steps, plot_path=None, verbose=False):
    parameter_file = read_parameter_file(input_path)
    model = create_model(model_id, verbose=verbose)
    model.init_model(
        parameter_file.line(line),
        use_index_col=parameter_file.use_index_col,
        point=line,
    )
    if verbose:
        model.write()
        print(f"Calculating counterterms in default settings with mu = {model.get_scale():.4f} GeV")

    steps = scan_renormalization_scale(model, n_steps)
    write_results_table(output_path, scale_scan_legend(model), [s.output_row() for s in steps])

    headers = ["mu_factor", "mu"] + model.legend_ct()
    table_data = [[f"{x:.4g}" for x in s.output_row()] for s in steps]
    print(tabulate(table_data, headers=headers, tablefmt='grid'))

    if plot_path:
        plot_scan(model, steps, plot_path)
    return steps


if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(
        description='Scan the renormalization scale for one parameter point',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES:
---------
  python scripts/scan_renormalization_scale.py vdm points.tsv scan.tsv --line 2 --steps 10
  python scripts/scan_renormalization_scale.py vdm points.tsv scan.tsv --line 2 --plot scan.png
        """
    )
    parser.add_argument('model', choices=available_models(), help='Model identifier')
    parser.add_argument('input', help='Parameter file (legend on the first line)')
    parser.add_argument('output', help='Output table')
    parser.add_argument('--line', type=int, required=True, help='Line number of the point')
    parser.add_argument('--steps', type=int, default=10, help='Number of scale steps (default: 10)')
    parser.add_argument('--plot', default=None, help='Save a plot of the counterterms to this file')
    parser.add_argument('--verbose', action='store_true', help='Print model summary')

    args = parser.parse_args()
    if args.steps < 1:
        parser.error("--steps must be at least 1")
    run(args.model, args.input, args.output, args.line, args.steps,
        plot_path=args.plot, verbose=args.verbose)
