
def _non_negative_int(value:str) -> int:
    import argparse

    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if n < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value!r}")
    return n


def main(argv=None):
    import argparse
    from importlib.metadata import version as metadata_version, PackageNotFoundError
    import logging

    from lastmod import lastmod
    from lastmod.report import NO_FILES_MESSAGE, format_timestamp

    try:
        version = metadata_version("lastmod")
    except PackageNotFoundError:
        version = "unknown"

    parser = argparse.ArgumentParser(
        prog="lastmod",
        description="find the most recent modification date in a directory tree",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory to scan. Default current directory.",
    )
    parser.add_argument(
        "--hidden", "-H",
        default=False,
        action="store_true",
        help="Include hidden files and directories.",
    )
    parser.add_argument(
        "--no-ignore", "-I",
        default=False,
        action="store_true",
        help="Don't respect .gitignore, .git/info/exclude or global git ignore "
        "files. Unlike some similar tools, .ignore files are disregarded too.",
    )
    parser.add_argument(
        "--follow-links", "-L",
        default=False,
        action="store_true",
        help="Follow symbolic links. Links which would lead back into a "
        "directory already being descended are not followed.",
    )
    parser.add_argument(
        "--max-depth", "-d",
        type=_non_negative_int,
        metavar="N",
        help="Maximum directory depth to traverse. 1 considers only the "
        "directory's immediate contents.",
    )
    parser.add_argument(
        "--threads", "-t",
        type=_non_negative_int,
        help="Maximum number of threads to use when walking the tree. 0 "
        "disables multi-threading entirely. Default automatic.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=version,
    )

    loglvl_grp = parser.add_mutually_exclusive_group()
    loglvl_grp.add_argument("--verbose", "-v", dest="loglevel", action="store_const", const=logging.DEBUG)
    loglvl_grp.add_argument("--quiet", "-q", dest="loglevel", action="store_const", const=logging.ERROR)

    parsed = vars(parser.parse_args(argv))

    loglevel = parsed.pop("loglevel", None)
    if loglevel is None:
        loglevel = logging.WARNING

    logging.basicConfig(
        level=loglevel,
        format="%(asctime)s:%(levelname)s:%(name)s: %(message)s",
    )

    newest = lastmod(**parsed)
    if newest is None:
        parser.exit(1, f"{NO_FILES_MESSAGE}\n")

    print(format_timestamp(newest))


if __name__ == "__main__":
    main()
