import sys

import atheris
from helpers import EnhancedDataProvider

with atheris.instrument_imports():
    from partsplit.exceptions import MalformedMultipart, MalformedPart
    from partsplit.multipart import PartIterator


def split_random_bytes(fdp: EnhancedDataProvider) -> None:
    boundary = fdp.ConsumeBoundary()
    for _ in PartIterator(boundary, fdp.ConsumeRandomBytes(), skip_malformed=True):
        pass


def split_framed_body(fdp: EnhancedDataProvider) -> None:
    boundary = fdp.ConsumeBoundary()
    body = b"--" + boundary + b"\r\n" + fdp.ConsumeRandomBytes() + b"\r\n--" + boundary + b"--\r\n"
    it = PartIterator(boundary, body)
    while True:
        try:
            next(it)
        except MalformedPart:
            continue
        except StopIteration:
            break


def TestOneInput(data: bytes) -> None:
    fdp = EnhancedDataProvider(data)
    targets = [split_random_bytes, split_framed_body]
    target = fdp.PickValueInList(targets)

    try:
        target(fdp)
    except MalformedMultipart:
        return


def main():
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
