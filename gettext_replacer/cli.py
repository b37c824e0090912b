import argparse
import json
import logging
import os
import sys
from dataclasses import asdict

from dotenv import load_dotenv

from .catalog import load_po_catalog
from .config import context_plural_callees, load_config
from .errors import GettextReplacerError
from .models import ReplacementRegistry
from .replacer import replace_message_nodes
from .walker import MessageCollector


def is_path_excluded(file_path, excluded_dirs):
    """
    Checks if a given file path is inside an excluded directory.
    Supports both simple directory names and specific path patterns.

    Examples:
    - 'dist' will exclude any directory named 'dist'
    - 'src/generated' will only exclude 'generated' directories inside 'src'
    """
    normalized_path = os.path.normpath(file_path)
    path_parts = normalized_path.split(os.sep)

    for excluded_pattern in excluded_dirs:
        if '/' in excluded_pattern or os.sep in excluded_pattern:
            pattern_parts = os.path.normpath(excluded_pattern).split(os.sep)
            for i in range(len(path_parts) - len(pattern_parts) + 1):
                if path_parts[i:i + len(pattern_parts)] == pattern_parts:
                    return True
        elif excluded_pattern in path_parts:
            return True

    return False


def iter_source_files(paths, file_extensions, excluded_directories):
    """Yields the script and component files named on the command line or found below directories."""
    extensions = tuple(file_extensions)
    for path_arg in paths:
        if os.path.isfile(path_arg):
            if path_arg.endswith(extensions) and not is_path_excluded(path_arg, excluded_directories):
                yield path_arg
        elif os.path.isdir(path_arg):
            for root, dirs, files in os.walk(path_arg, topdown=True):
                dirs[:] = sorted(d for d in dirs if d not in excluded_directories)
                for file in sorted(files):
                    full_path = os.path.join(root, file)
                    if file.endswith(extensions) and not is_path_excluded(full_path, excluded_directories):
                        yield full_path


def output_path_for(file_path, output_dir):
    if not output_dir:
        return file_path
    relative = os.path.relpath(file_path)
    if relative.startswith(os.pardir):
        relative = os.path.basename(file_path)
    return os.path.join(output_dir, relative)


def process_file(file_path, collector, catalog, context_callees, output_dir=None, dry_run=False, as_json=False):
    """
    Extracts the messages of a single file and, when a catalog is given, writes the
    translated source. Returns (messages, changed).
    """
    if not as_json:
        print(f"\n--- Scanning file: {file_path} ---\n")
    with open(file_path, 'r', encoding='utf-8') as f:
        content = f.read()

    # A fresh registry per file, sites must belong to the text being rewritten
    registry = ReplacementRegistry()
    content, messages = collector.parse_source_file(content, registry, file_name=file_path)

    if not as_json:
        if not messages:
            print("No translation calls found.")
        for message in messages:
            context = f" (context: '{message.context}')" if message.context else ""
            plural = f" / '{message.text_plural}'" if message.text_plural else ""
            print(f"Found: '{message.text}'{plural}{context} at Line {message.line}")

    if catalog is None or not messages:
        return messages, False

    new_content = replace_message_nodes(content, file_path, catalog, registry, context_callees)
    changed = new_content != content
    target = output_path_for(file_path, output_dir)

    if dry_run:
        if changed and not as_json:
            print(f"Would update file: {target}")
        return messages, changed

    if changed or output_dir:
        os.makedirs(os.path.dirname(target) or '.', exist_ok=True)
        with open(target, 'w', encoding='utf-8') as f:
            f.write(new_content)
        if not as_json:
            print(f"Successfully updated file: {target}")
    return messages, changed


def build_arg_parser():
    parser = argparse.ArgumentParser(
        description='Extract gettext calls from JS/TS/Vue files and rewrite them with translations'
    )
    parser.add_argument('files', nargs='+', help='One or more source files or directories to process')
    parser.add_argument('-p', '--po', help='Translation catalog (.po); when given, files are rewritten')
    parser.add_argument('-o', '--output-dir', help='Write rewritten files here instead of in place')
    parser.add_argument('-n', '--dry-run', action='store_true', help='Report the files that would change, write nothing')
    parser.add_argument('-c', '--config', help='Path to a config.json overriding the defaults')
    parser.add_argument('--config-endpoint', help='Base URL of a config service exposing GET /config')
    parser.add_argument('--json', action='store_true', help='Print the extracted messages as JSON')
    parser.add_argument('--include-fuzzy', action='store_true', help='Use fuzzy catalog entries as well')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser


def main(argv=None):
    """
    Main function to handle arguments and run the collector.
    """
    load_dotenv()
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        config = load_config(config_path=args.config, endpoint=args.config_endpoint)
        collector = MessageCollector.from_config(config)
        catalog = load_po_catalog(args.po, include_fuzzy=args.include_fuzzy) if args.po else None
    except GettextReplacerError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 2

    context_callees = context_plural_callees(config)
    all_messages = []
    changed_files = []
    file_found = False
    for file_path in iter_source_files(args.files, config["file_extensions"], config["excluded_directories"]):
        file_found = True
        try:
            messages, changed = process_file(
                file_path, collector, catalog, context_callees,
                output_dir=args.output_dir, dry_run=args.dry_run, as_json=args.json,
            )
        except GettextReplacerError as e:
            print(f"❌ Error: {file_path}: {e}", file=sys.stderr)
            return 2
        except (OSError, UnicodeDecodeError) as e:
            print(f"⚠️ Warning: Could not process {file_path}: {e}", file=sys.stderr)
            continue
        all_messages.extend(messages)
        if changed:
            changed_files.append(file_path)

    if not file_found:
        print("No source files found to process. Please check your file paths or directories.")
        return 1

    if args.json:
        print(json.dumps([asdict(message) for message in all_messages], indent=4, ensure_ascii=False))
        return 0

    print("\n--- Scan complete. ---")
    print(f"Parsed {collector.stats.parsed_files} file(s), "
          f"{collector.stats.files_with_messages} with translation calls, "
          f"{len(all_messages)} message(s) found.")
    if catalog is not None:
        verb = "would change" if args.dry_run else "changed"
        print(f"{len(changed_files)} file(s) {verb}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
