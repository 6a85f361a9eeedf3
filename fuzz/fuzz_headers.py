import sys

import atheris
from helpers import EnhancedDataProvider

with atheris.instrument_imports():
    from partsplit.headers import parse_header_block, parse_options_header
    from partsplit.multipart import extract_boundary


def fuzz_header_block(fdp: EnhancedDataProvider) -> None:
    parse_header_block(fdp.ConsumeRandomBytes())


def fuzz_options_header(fdp: EnhancedDataProvider) -> None:
    value = fdp.ConsumeRandomBytes()
    extract_boundary(value)
    parse_options_header(value)


def TestOneInput(data: bytes) -> None:
    fdp = EnhancedDataProvider(data)
    targets = [fuzz_header_block, fuzz_options_header]
    target = fdp.PickValueInList(targets)

    try:
        target(fdp)
    except AssertionError:
        return


def main():
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
