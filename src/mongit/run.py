"""
Snapshots and restores MongoDB databases by committing dumps to git.
"""
import sys
from pathlib import Path
from typing import Callable

import click
from dynaconf import Dynaconf
from loguru import logger

from mongit.git.client import GitClient
from mongit.mongo.client import Client
from mongit.snapshots import SnapshotManager
from mongit.utils.config import parse_config
from mongit.utils.datatypes import Result
from mongit.utils.logging import setup_logging
from mongit.utils.process import CommandError, run_command


class CtxArgs:
    """
    Cache object for arguments between click group and commands.
    """

    def __init__(self, config_folder: Path, manager: SnapshotManager):
        self.config_folder = Path(config_folder)
        self.manager = manager


def build_manager(settings: Dynaconf, work_dir: Path, container: str = None,
                  uri: str = None, runner: Callable = None) -> SnapshotManager:
    """
    Create the clients from the settings.
    Command line values win over the settings.
    :param settings: parsed config
    :param work_dir: git working tree
    :param container: --docker value
    :param uri: --uri value
    :param runner: function running a command. run_command by default
    :return: snapshot manager
    """
    runner = runner or run_command
    git = GitClient(
        work_dir=work_dir,
        binary=settings('git.binary', default='git'),
        message_prefix=settings('git.message_prefix', default='mongit-'),
        runner=runner,
    )
    mongo = Client(
        work_dir=work_dir,
        dump_dir=settings('mongo.dump_dir', default='dump'),
        uri=uri or settings('mongo.uri', default=None),
        container=container or settings('docker.container', default=None),
        container_dump_dir=settings('docker.dump_dir', default='/opt/dump'),
        docker_binary=settings('docker.binary', default='docker'),
        dump_binary=settings('mongo.dump_binary', default='mongodump'),
        restore_binary=settings('mongo.restore_binary', default='mongorestore'),
        drop=settings('mongo.drop', cast=bool, default=False),
        runner=runner,
    )
    return SnapshotManager(git, mongo,
                           rollback=settings('snapshot.rollback', cast=bool, default=False))


def validate_label(ctx, param, value):
    if not value or not value.strip():
        raise click.BadParameter('must not be empty')
    if '\n' in value or '\r' in value:
        raise click.BadParameter('must be a single line')
    if value != value.strip():
        raise click.BadParameter('must not start or end with whitespace')
    return value


def finish(result: Result, message: str):
    """
    Report the result of an operation. Exits with 1 on failure.
    :param result: operation result
    :param message: shown on success
    """
    if not result.ok:
        logger.critical(result.message)
        sys.exit(1)
    click.secho(message, fg='green')


@click.group()
@click.option(
    '-c',
    '--config-folder',
    help='Folder where the config files are stored. Make sure that the user has read and '
         'write access to the folder.',
    default=click.get_app_dir('mongit'),
    show_default=True,
)
@click.option(
    '-C',
    '--work-dir',
    help='Git working tree holding the dumps.',
    default='.',
    show_default=True,
    type=click.Path(exists=True, file_okay=False),
)
@click.option(
    '--docker', 'container',
    help='Run mongodump / mongorestore inside this container.',
    default=None,
)
@click.option(
    '--uri',
    help='MongoDB connection string passed to mongodump / mongorestore.',
    default=None,
)
@click.option(
    '-v', '--verbose',
    is_flag=True, default=False,
    help='Show every command mongit runs.',
)
@click.pass_context
@click.version_option(package_name='mongit')
def main(ctx, config_folder, work_dir, container, uri, verbose):
    """
    Snapshot MongoDB databases into git commits and restore them by label.
    """
    try:
        settings = parse_config(Path(config_folder))
        setup_logging(
            'DEBUG' if verbose else settings('logging.console_level', default='INFO'),
            log_dir=settings('logging.dir', cast=Path, default=None),
            log_level=settings('logging.level', default='INFO'),
        )
        manager = build_manager(settings, Path(work_dir), container, uri)
    except Exception as e:
        logger.exception(f'Error during config parsing! {e}')
        sys.exit(1)
    ctx.obj = CtxArgs(config_folder, manager)


@main.command('init')
@click.pass_context
def init_command(ctx):
    """
    Create the initial snapshot.
    """
    args: CtxArgs = ctx.obj
    finish(args.manager.init(), 'mongit initialized')


@main.command('branch')
@click.argument('name', callback=validate_label)
@click.pass_context
def branch_command(ctx, name):
    """
    Create a git branch and snapshot the database as NAME-initial.
    """
    args: CtxArgs = ctx.obj
    finish(args.manager.branch(name), f'Created branch {name}')


@main.command('snapshot')
@click.argument('label', callback=validate_label)
@click.pass_context
def snapshot_command(ctx, label):
    """
    Dump the database and commit it as LABEL.
    """
    args: CtxArgs = ctx.obj
    finish(args.manager.snapshot(label), f'Created snapshot {label}')


@main.command('use')
@click.argument('label', callback=validate_label)
@click.pass_context
def use_command(ctx, label):
    """
    Check out the snapshot LABEL and restore its dump.
    """
    args: CtxArgs = ctx.obj
    finish(args.manager.restore(label), f'Now using snapshot {label}')


@main.command('list')
@click.pass_context
def list_command(ctx):
    """
    List the snapshots of the current branch.
    """
    args: CtxArgs = ctx.obj
    try:
        snapshots = args.manager.list()
    except CommandError as e:
        logger.critical(e.output)
        sys.exit(1)
    if len(snapshots) == 0:
        click.secho('None! You have to create a snapshot first...', fg='red',
                    file=sys.stderr)
        sys.exit(1)
    output = click.style('Listing snapshots:\n', fg='green', bold=True)
    for snapshot in snapshots:
        output += click.style(f'{snapshot.commit}', fg='yellow')
        output += click.style(f'\t{snapshot.label}\n', fg='cyan')
    output += '\nRestore a snapshot with the use command. E.g. the newest one:\n'
    output += click.style(f'mongit -c {args.config_folder} use {snapshots[0].label}', fg='green')
    click.echo(output)


if __name__ == '__main__':
    main()
