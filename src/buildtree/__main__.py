from buildtree.cli import run

run()
