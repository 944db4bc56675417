from __future__ import annotations

import argparse
import os
import sys

from alive_progress import alive_it

from . import config, constants, t
from . import messages as m
from .dom import outerHTML
from .errors import MarkupParseError, RegistryError
from .htmlify import htmlFromDocument
from .parser import DEFAULT_TAGS, MarkupDocument, ParseConfig, TagRegistry, debugNode, parseDocument


def main() -> None:
    try:
        with open(config.scriptPath("semver.txt"), encoding="utf-8") as fh:
            semver = fh.read().strip()
            semverText = f"papermark v{semver}: "
    except FileNotFoundError:
        semver = "???"
        semverText = ""

    argparser = argparse.ArgumentParser(description=f"{semverText}Renders bracket-tag markup into HTML.")
    argparser.add_argument("--version", action="version", version=semver)
    argparser.add_argument(
        "-q",
        "--quiet",
        dest="quiet",
        action="count",
        default=0,
        help="Silences one level of message, least-important first.",
    )
    argparser.add_argument(
        "-s",
        "--silent",
        dest="silent",
        action="store_true",
        help="Shorthand for 'as many -q as you need to shut it up'",
    )
    argparser.add_argument(
        "-f",
        "--force",
        dest="errorLevel",
        action="store_const",
        const="nothing",
        help="Force the renderer to run to completion; fatal errors don't stop processing.",
    )
    argparser.add_argument(
        "-d",
        "--dry-run",
        dest="dryRun",
        action="store_true",
        help="Prevents the renderer from actually saving anything to disk, but otherwise fully runs.",
    )
    argparser.add_argument(
        "-a",
        "--ascii-only",
        dest="asciiOnly",
        action="store_true",
        help="Force all messages to be ASCII-only.",
    )
    argparser.add_argument(
        "--print",
        dest="printMode",
        choices=m.PRINT_MODES,
        default=None,
        help="How messages are formatted. Options are 'plain' (just text), 'console' (text with console color codes), 'markup' (XML), and 'json' (JSON stream). Defaults to 'console'.",
    )
    argparser.add_argument(
        "--die-on",
        dest="errorLevel",
        choices=list(m.MESSAGE_LEVELS.keys()),
        help="Determines what sorts of errors stop the renderer from producing output. Default is 'fatal'; the -f flag is a shorthand for 'nothing'",
    )
    argparser.add_argument(
        "--die-when",
        dest="errorTiming",
        choices=m.DEATH_TIMING,
        default="late",
        help="When a disallowed error should force a stop. 'early' stops at the first one; 'late' processes the whole input first so you can see all the errors.",
    )
    argparser.add_argument(
        "--tags",
        dest="tagsFile",
        default=None,
        metavar="FILE",
        help="JSON file of extra tag definitions, added to (and overriding) the built-in tags.",
    )

    subparsers = argparser.add_subparsers(title="Subcommands", dest="subparserName")

    renderParser = subparsers.add_parser("render", help="Render a markup file into HTML.")
    renderParser.add_argument(
        "infile",
        nargs="?",
        default=None,
        help='Path to the source file, or stdin ("-"). Defaults to stdin.',
    )
    renderParser.add_argument(
        "outfile",
        nargs="?",
        default=None,
        help='Path to the output file, or stdout ("-"). Defaults to stdout.',
    )

    tokensParser = subparsers.add_parser("tokens", help="Print the flat list of nodes the markup parses into.")
    tokensParser.add_argument("infile", nargs="?", default=None, help="Path to the source file.")

    treeParser = subparsers.add_parser("tree", help="Print the tag tree the markup reconciles into.")
    treeParser.add_argument("infile", nargs="?", default=None, help="Path to the source file.")

    checkParser = subparsers.add_parser("check", help="Check markup files, reporting any problems.")
    checkParser.add_argument("infiles", nargs="+", metavar="FILE", help="Paths to the source files.")

    options = argparser.parse_args()

    if options.silent:
        m.state.printOn = "nothing"
        m.state.silent = True
    else:
        m.state.printOn = m.MessagesState.categoryName(options.quiet)
    if options.errorLevel is not None:
        m.state.dieOn = options.errorLevel
    m.state.dieWhen = options.errorTiming
    m.state.asciiOnly = options.asciiOnly
    if options.printMode is None:
        if "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb":
            m.state.printMode = "plain"
        else:
            m.state.printMode = "console"
    else:
        m.state.printMode = options.printMode
    constants.dryRun = options.dryRun

    parseConfig = configFromOptions(options)
    if parseConfig is None:
        m.retroactivelyCheckErrorLevel()
        return

    if options.subparserName == "render":
        handleRender(options, parseConfig)
    elif options.subparserName == "tokens":
        handleTokens(options, parseConfig)
    elif options.subparserName == "tree":
        handleTree(options, parseConfig)
    elif options.subparserName == "check":
        handleCheck(options, parseConfig)
    else:
        argparser.print_help()
    m.retroactivelyCheckErrorLevel()


def configFromOptions(options: argparse.Namespace) -> ParseConfig | None:
    tags = DEFAULT_TAGS
    if options.tagsFile is not None:
        try:
            with open(options.tagsFile, encoding="utf-8") as fh:
                tags = TagRegistry.fromJson(fh.read(), base=DEFAULT_TAGS)
        except OSError as e:
            m.die(f"Couldn't read the tags file '{options.tagsFile}':\n{e}")
            return None
        except RegistryError as e:
            m.die(f"Couldn't load the tags file '{options.tagsFile}':\n{e}")
            return None
    return ParseConfig(tags=tags)


def readInput(infile: str | None) -> tuple[str, str] | None:
    # Returns the (text, context name) of the input.
    if infile is None or infile == "-":
        return sys.stdin.read(), "stdin"
    try:
        with open(infile, encoding="utf-8") as fh:
            return fh.read(), infile
    except OSError as e:
        m.die(f"Couldn't read the input file '{infile}':\n{e}")
        return None


def loadDocument(infile: str | None, parseConfig: ParseConfig) -> MarkupDocument | None:
    source = readInput(infile)
    if source is None:
        return None
    text, context = source
    try:
        doc = parseDocument(text, ParseConfig(tags=parseConfig.tags, context=context))
    except MarkupParseError as e:
        m.die(str(e))
        return None
    reportDiagnostics(doc)
    return doc


def reportDiagnostics(doc: MarkupDocument) -> None:
    for diag in doc.diagnostics:
        m.diagnose(diag, doc.stream)


def handleRender(options: argparse.Namespace, parseConfig: ParseConfig) -> None:
    doc = loadDocument(options.infile, parseConfig)
    if doc is None:
        return
    m.retroactivelyCheckErrorLevel()
    html = outerHTML(htmlFromDocument(doc))
    if constants.dryRun:
        m.say("Dry run; not writing any output.")
        return
    if options.outfile is None or options.outfile == "-":
        # The document itself, not a message; -a and -q don't apply.
        sys.stdout.write(html + "\n")
        return
    try:
        with open(options.outfile, "w", encoding="utf-8") as fh:
            fh.write(html + "\n")
    except OSError as e:
        m.die(f"Couldn't write the output file '{options.outfile}':\n{e}")
        return
    m.success(f"Wrote {options.outfile}.")


def handleTokens(options: argparse.Namespace, parseConfig: ParseConfig) -> None:
    doc = loadDocument(options.infile, parseConfig)
    if doc is None:
        return
    for node in doc.nodes:
        m.p(f"{doc.loc(node.span)} {debugNode(node)}")


def handleTree(options: argparse.Namespace, parseConfig: ParseConfig) -> None:
    doc = loadDocument(options.infile, parseConfig)
    if doc is None:
        return
    m.p(debugNode(doc.tree))


def handleCheck(options: argparse.Namespace, parseConfig: ParseConfig) -> None:
    paths: list[str] = options.infiles
    failures: list[str] = []
    pathProgress = alive_it(paths, dual_line=True, length=20)
    for path in pathProgress:
        pathProgress.text(path)
        countBefore = m.state.problemCount()
        doc = loadDocument(path, parseConfig)
        if doc is None or m.state.problemCount() > countBefore:
            failures.append(path)
    if not failures:
        m.success(f"No problems found in {len(paths)} {pluralFile(len(paths))}.")
    else:
        m.failure(f"{len(failures)}/{len(paths)} {pluralFile(len(paths))} had problems:")
        for path in failures:
            m.p(constants.bulletPrefix + path)


def pluralFile(count: int) -> t.Literal["file", "files"]:
    return "file" if count == 1 else "files"
