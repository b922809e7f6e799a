import argparse

import geocolumn
from src.column.RunParameters import load_parameters


def build_parser():
    parser = argparse.ArgumentParser(prog="geocolumn", description="Assemble a granular column and run the two-stage DEM collapse.")
    parser.add_argument("filekey", help="input deck without extension; FILEKEY.inp is preferred, FILEKEY.json is accepted")
    parser.add_argument("nproc", nargs="?", type=int, default=1, help="number of cpu threads used by the solver (default: 1)")
    parser.add_argument("--output", default="OutputData", help="directory receiving the stage outputs (default: OutputData)")
    parser.add_argument("--no-logfile", action="store_true", help="do not tee the console output into a dated log file")
    parser.add_argument("--no-vtk", action="store_true", help="write npz frames only, without VTK point files")
    return parser


def run(filekey, nproc=1, output="OutputData", logfile=True, visualize=True):
    params = load_parameters(filekey)
    geocolumn.init(arch="cpu", cpu_max_num_threads=nproc, log=logfile)

    dem = geocolumn.DEM()
    dem.set_save_path(output)
    dem.set_visualize(visualize)
    params.print_info()
    return geocolumn.Column(params, dem, nproc=nproc).run()


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.nproc < 1:
        raise SystemExit(f"geocolumn: thread number should be larger than 0, got {args.nproc}")
    run(args.filekey, args.nproc, args.output, not args.no_logfile, not args.no_vtk)
    return 0
