import sys

from invoke import run, task


class g:
    test_success = False


@task
def test(ctx):
    test_cmd = [
        "pytest",  # Test command
        "--cov-report term-missing",  # Print only uncovered lines to stdout
        "--cov partsplit",  # Test only this package
        "--timeout=30",  # Each test should timeout after 30 sec
    ]

    # Test in this directory
    test_cmd.append("tests")

    res = run(" ".join(test_cmd), pty=False)
    g.test_success = res.ok


@task
def fuzz(ctx, target="split", runs=100000):
    run(f"python fuzz/fuzz_{target}.py -runs={runs}", pty=False)


@task(pre=[test])
def build(ctx):
    if not g.test_success:
        print("Tests must pass before building!", file=sys.stderr)
        return

    run("python -m build")
