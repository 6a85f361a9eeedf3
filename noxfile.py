import nox

nox.needs_version = ">=2024.4.15"
nox.options.default_venv_backend = "uv|virtualenv"


@nox.session
@nox.parametrize("editable", [True, False])
def tests(session: nox.Session, editable: bool) -> None:
    session.install("-e.[test]" if editable else ".[test]")
    session.run("pytest", "--timeout=30", "tests")


@nox.session
@nox.parametrize("target", ["split", "headers"])
def fuzz(session: nox.Session, target: str) -> None:
    session.install(".", "atheris")
    session.run("python", f"fuzz/fuzz_{target}.py", "-runs=10000")
