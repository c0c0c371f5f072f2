# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Command Line Interface for the containerless Docker deployer.
"""
import logging
import os
import sys
import zipfile

import click

from ..BUILDERS.dockerfile_renderer import DockerfileRenderer, DOCKERFILE_TEMPLATE, DEPLOYABLE_FILENAME
from ..MANAGERS.containerless_deployer import ContainerlessDeployer
from ..MANAGERS.lifecycle_dispatcher import RecordingCommandEmitter
from ..MODELS.archive import Archive
from ..PARSERS.config_parser import ConfigParser
from ..REGISTRY.cube_registry import YamlCubeRegistry
from ..errors import ContainerlessError


@click.group()
@click.option('--config', '-c', 'config_file', default=None, help='Deployer configuration YAML')
@click.option('--registry', '-r', 'registry_file', default='cubes.yml', help='Cube definitions YAML')
@click.option('--env-file', default='.env', help='Environment file used when no --config is given')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, config_file, registry_file, env_file, verbose):
    """
    Containerless - deploy test archives into Dockerfile-built cubes.

    Commands run against a dry-run runtime that only reports the lifecycle
    commands it would send.
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj['config_file'] = config_file
    ctx.obj['registry_file'] = registry_file
    ctx.obj['env_file'] = env_file


def _fail(message: str):
    click.echo(f"Error: {message}")
    sys.exit(1)


def _build_deployer(ctx):
    """
    Creates a deployer from the files named on the command line.
    """
    parser = ConfigParser()
    config_file = ctx.obj['config_file']
    if config_file:
        if not os.path.isfile(config_file):
            _fail(f"{config_file} not found.")
        config = parser.parse(config_file)
    else:
        config = parser.from_environment(env_file=ctx.obj['env_file'])

    registry_file = ctx.obj['registry_file']
    if not os.path.exists(registry_file):
        _fail(f"{registry_file} not found.")
    registry = YamlCubeRegistry.from_file(registry_file)

    emitter = RecordingCommandEmitter()
    return ContainerlessDeployer(config, registry, emitter), emitter


def _echo_commands(emitter: RecordingCommandEmitter):
    for command, cube in emitter.commands:
        click.echo(f"{command.value:8} {cube}")


@cli.command()
@click.argument('build_dir', type=click.Path(exists=True, file_okay=False))
@click.argument('deployable_filename')
def render(build_dir, deployable_filename):
    """Print the Dockerfile rendered from a build directory's template."""
    renderer = DockerfileRenderer(cleanup=False)
    try:
        content = renderer.render(os.path.join(build_dir, DOCKERFILE_TEMPLATE),
                                  {DEPLOYABLE_FILENAME: deployable_filename})
    except ContainerlessError as e:
        _fail(str(e))
    click.echo(content.encode('utf-8', errors='surrogateescape'), nl=False)


@cli.command()
@click.argument('archive_path', type=click.Path(exists=True))
@click.option('--name', '-n', default=None, help='Archive name when deploying a directory')
@click.pass_context
def deploy(ctx, archive_path, name):
    """Deploy an archive (zip file or directory)."""
    try:
        if os.path.isdir(archive_path):
            archive = Archive.from_directory(archive_path, name or os.path.basename(os.path.abspath(archive_path)) + ".war")
        else:
            archive = Archive.from_zip(archive_path)
            if name:
                archive.name = name
        deployer, emitter = _build_deployer(ctx)
        endpoint = deployer.deploy(archive)
    except zipfile.BadZipFile:
        _fail(f"{archive_path} is not a zip archive.")
    except ContainerlessError as e:
        _fail(str(e))

    _echo_commands(emitter)
    click.echo(f"Deployed {archive.name} at {endpoint.url} ({endpoint.protocol})")


@cli.command()
@click.argument('archive_name')
@click.pass_context
def undeploy(ctx, archive_name):
    """Undeploy an archive."""
    try:
        deployer, emitter = _build_deployer(ctx)
        deployer.undeploy(Archive(name=archive_name))
    except ContainerlessError as e:
        _fail(str(e))

    _echo_commands(emitter)
    click.echo(f"Undeployed {archive_name}.")


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})


if __name__ == '__main__':
    main()
