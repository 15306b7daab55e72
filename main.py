from rich.pretty import pprint

from argtree import *

parser = ArgumentParser("main", fancy=True)
parser.add_argument("file", type=File(exists=False))
parser.add_argument("--args", nargs="*")
parser.add_argument("-d", "--debug", type=Boolean)

build = parser.command("build", error_code=2)
build.add_argument("-j", "--jobs", type=int, default=1)
build.add_argument("-D", "--define", type=KeyValues)


@build.handle
def callback(arguments):
    pprint(arguments)


if __name__ == '__main__':
    report = parser.parse()
    report.exit_if_errors()
    pprint(report.parsed)
