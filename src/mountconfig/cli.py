#!/usr/bin/env python3
"""
mountconfig CLI - migration helper for encrypted JSON configuration.

Encrypts or decrypts single values and whole JSON files with the legacy
cipher, so existing files can be moved to another secrets tool.
"""

import json
import os
import sys
from pathlib import Path
from typing import Any, List, Optional

import click
from rich.console import Console

from mountconfig._version import __version__
from mountconfig.configuration import KEY_DELIMITER
from mountconfig.core.defaults import DEFAULT_KEY_ENV
from mountconfig.core.exceptions import (
    CryptographicError,
    EncryptionError,
    FormatError,
    MountConfigError,
)
from mountconfig.core.logging import logger
from mountconfig.encryption.encryptor import Encryptor, StringEncryptor

err_console = Console(stderr=True)


# ============================================================================
# JSON TRAVERSAL
# ============================================================================


def encrypt_json_node(node: Any, encryptor: StringEncryptor) -> Any:
    """Encrypt every string leaf; numbers, booleans and null stay as they are."""
    if isinstance(node, str):
        return encryptor.encrypt(node)
    if isinstance(node, dict):
        return {name: encrypt_json_node(value, encryptor) for name, value in node.items()}
    if isinstance(node, list):
        return [encrypt_json_node(item, encryptor) for item in node]
    return node


def decrypt_json_node(
    node: Any,
    encryptor: StringEncryptor,
    lenient: bool = False,
    skipped: Optional[List[str]] = None,
    path: str = "",
) -> Any:
    """
    Decrypt every string leaf.

    A value that does not decrypt raises `EncryptionError` whose ``key`` is
    the colon-delimited path of the value. With ``lenient`` the value is kept
    as is and its path appended to ``skipped``.
    """
    if isinstance(node, str):
        try:
            return encryptor.decrypt(node)
        except (CryptographicError, FormatError) as e:
            if not lenient:
                raise EncryptionError(
                    f"Failed to decrypt value at '{path}'.", key=path, cause=e
                ) from e
            if skipped is not None:
                skipped.append(path)
            return node
    if isinstance(node, dict):
        return {
            name: decrypt_json_node(
                value, encryptor, lenient, skipped, _child_path(path, name)
            )
            for name, value in node.items()
        }
    if isinstance(node, list):
        return [
            decrypt_json_node(item, encryptor, lenient, skipped, _child_path(path, str(index)))
            for index, item in enumerate(node)
        ]
    return node


def _child_path(path: str, name: str) -> str:
    return f"{path}{KEY_DELIMITER}{name}" if path else name


# ============================================================================
# HELPERS
# ============================================================================


def resolve_key(key: Optional[str], key_env: str) -> str:
    """
    Pick the encryption key.

    1. --key, with a warning because it ends up in shell history
    2. the environment variable named by --key-env
    """
    if key and key.strip():
        err_console.print(
            "[yellow]Warning: passing the key via --key is not secure. "
            "Use --key-env instead.[/yellow]"
        )
        return key

    env_key = os.environ.get(key_env, "")
    if not env_key.strip():
        raise click.ClickException(
            f"Encryption key not found. Set environment variable '{key_env}' "
            "or use --key-env option."
        )
    return env_key


def _make_encryptor(key: Optional[str], key_env: str) -> Encryptor:
    try:
        return Encryptor(resolve_key(key, key_env))
    except MountConfigError as e:
        raise click.ClickException(e.message) from e


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8-sig"))
    except json.JSONDecodeError as e:
        raise click.ClickException(
            f"Invalid JSON file {path} (line {e.lineno}, column {e.colno}): {e.msg}"
        ) from e


def _write_json(path: Path, document: Any) -> None:
    path.write_text(json.dumps(document, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def show_deprecation_warning() -> None:
    err_console.print()
    err_console.print("[bold yellow]WARNING: built-in encryption is DEPRECATED[/bold yellow]")
    err_console.print("[yellow]This tool is provided for migration purposes only.[/yellow]")
    err_console.print("[yellow]For new projects use a dedicated secrets tool such as SOPS.[/yellow]")
    err_console.print()


key_option = click.option(
    "--key", "-k", default=None, help="Encryption key (not recommended - use --key-env instead)"
)
key_env_option = click.option(
    "--key-env",
    default=DEFAULT_KEY_ENV,
    show_default=True,
    help="Environment variable containing the encryption key",
)


# ============================================================================
# COMMANDS
# ============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="mountconfig")
def cli():
    """
    mountconfig - configuration encryption tool

    Migration helper for JSON configuration files encrypted with the
    legacy cipher.
    """
    pass


@cli.command("encrypt-value")
@click.argument("text")
@key_option
@key_env_option
def encrypt_value(text: str, key: Optional[str], key_env: str):
    """Encrypt a single text value"""
    encryptor = _make_encryptor(key, key_env)
    click.echo(encryptor.encrypt(text))


@cli.command("decrypt-value")
@click.argument("encrypted")
@key_option
@key_env_option
def decrypt_value(encrypted: str, key: Optional[str], key_env: str):
    """Decrypt a single text value"""
    encryptor = _make_encryptor(key, key_env)
    try:
        click.echo(encryptor.decrypt(encrypted))
    except MountConfigError as e:
        raise click.ClickException(e.message) from e


@cli.command()
@click.option(
    "--input",
    "-i",
    "input_path",
    required=True,
    type=click.Path(path_type=Path, dir_okay=False),
    help="Input plain JSON file",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    default=None,
    type=click.Path(path_type=Path, dir_okay=False),
    help="Output encrypted JSON file (default: the input file)",
)
@key_option
@key_env_option
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing output file")
@click.option("--in-place", is_flag=True, help="Encrypt the input file in place")
def encrypt(
    input_path: Path,
    output_path: Optional[Path],
    key: Optional[str],
    key_env: str,
    force: bool,
    in_place: bool,
):
    """Encrypt the values of a JSON configuration file"""
    show_deprecation_warning()

    if not input_path.is_file():
        raise click.ClickException(f"Input file not found: {input_path.resolve()}")

    encryptor = _make_encryptor(key, key_env)
    target = input_path if in_place else (output_path or input_path)

    if target.exists() and not force and not in_place:
        raise click.ClickException(
            f"Output file already exists: {target.resolve()}\n"
            "Use --force to overwrite or --in-place to modify the original."
        )

    click.echo(f"Encrypting {input_path.resolve()}...")
    document = _read_json(input_path)
    _write_json(target, encrypt_json_node(document, encryptor))

    logger.info("File encrypted", output=str(target))
    click.echo(click.style(f"✓ Encrypted successfully: {target.resolve()}", fg="green"))


@cli.command()
@click.option(
    "--input",
    "-i",
    "input_path",
    required=True,
    type=click.Path(path_type=Path, dir_okay=False),
    help="Input encrypted JSON file",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    required=True,
    type=click.Path(path_type=Path, dir_okay=False),
    help="Output decrypted JSON file",
)
@key_option
@key_env_option
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing output file")
@click.option(
    "--lenient",
    is_flag=True,
    help="Keep values that do not decrypt instead of failing",
)
def decrypt(
    input_path: Path,
    output_path: Path,
    key: Optional[str],
    key_env: str,
    force: bool,
    lenient: bool,
):
    """Decrypt the values of a JSON configuration file"""
    if not input_path.is_file():
        raise click.ClickException(f"Input file not found: {input_path.resolve()}")

    encryptor = _make_encryptor(key, key_env)

    if output_path.exists() and not force:
        raise click.ClickException(
            f"Output file already exists: {output_path.resolve()}\nUse --force to overwrite."
        )

    click.echo(f"Decrypting {input_path.resolve()}...")
    document = _read_json(input_path)

    skipped: List[str] = []
    try:
        decrypted = decrypt_json_node(document, encryptor, lenient=lenient, skipped=skipped)
    except EncryptionError as e:
        raise click.ClickException(
            f"{e.message} Wrong key, or the value is not encrypted "
            "(use --lenient to keep such values)."
        ) from e

    for path in skipped:
        err_console.print(f"[yellow]Warning: value at '{path}' was not decrypted, kept as is[/yellow]")

    _write_json(output_path, decrypted)
    logger.info("File decrypted", output=str(output_path), skipped=len(skipped))
    click.echo(click.style(f"✓ Decrypted successfully: {output_path.resolve()}", fg="green"))


def main():
    """Main entry point"""
    cli()


if __name__ == "__main__":
    sys.exit(main())
