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
Command Line Interface for composedoc.
"""
import logging
import os

import click
import yaml
from dotenv import dotenv_values

from ..errors import ComposeError
from ..PARSERS.compose_parser import ComposeParser
from ..PARSERS.text_formats import ComposeFormat
from ..UTILS.dependency_resolver import DependencyResolver


def _interpolation_context(env_file):
    """
    Variables for ${VAR} substitution: the .env file, overridden by the process environment.
    """
    context = {}
    if env_file:
        context.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    context.update(os.environ)
    return context


@click.group()
@click.option('--file', '-f', default='docker-compose.yml', help='Compose file path')
@click.option('--interpolate', is_flag=True, help='Substitute ${VAR} references from the environment')
@click.option('--env-file', type=click.Path(exists=True, dir_okay=False), help='Variables for interpolation')
@click.option('--verbose', '-v', is_flag=True, help='Log debug messages')
@click.pass_context
def cli(ctx, file, interpolate, env_file, verbose):
    """
    composedoc - read, normalize and rewrite docker-compose files.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj['file'] = file
    ctx.obj['parser'] = ComposeParser(_interpolation_context(env_file) if interpolate else None)
    if os.path.exists(file):
        try:
            ctx.obj['config'] = ctx.obj['parser'].parse(file)
        except (ComposeError, yaml.YAMLError, ValueError) as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)


def _require_config(ctx):
    config = ctx.obj.get('config')
    if config is None:
        click.echo(f"Error: {ctx.obj['file']} not found.")
    return config


def _require_service(ctx, config, service):
    svc = config.get_service(service)
    if svc is None:
        click.echo(f"Error: no such service: {service}", err=True)
        ctx.exit(1)
    return svc


@cli.command()
@click.pass_context
def services(ctx):
    """List services with their image and version."""
    config = _require_config(ctx)
    if config:
        click.echo(f"{'SERVICE':15} {'IMAGE':40} {'VERSION':10}")
        click.echo("-" * 67)
        for name in sorted(config.services):
            svc = config.services[name]
            click.echo(f"{name:15} {svc.get_image_name():40} {svc.get_version():10}")


@cli.command('get-version')
@click.argument('service')
@click.pass_context
def get_version(ctx, service):
    """Print the image tag of a service."""
    config = _require_config(ctx)
    if config:
        click.echo(_require_service(ctx, config, service).get_version())


@cli.command('set-version')
@click.argument('service')
@click.argument('version')
@click.option('--out', '-o', default=None, help='Output file (defaults to the compose file)')
@click.pass_context
def set_version(ctx, service, version, out):
    """Set the image tag of a service and save the file."""
    config = _require_config(ctx)
    if config:
        _require_service(ctx, config, service).set_version(version)
        target = out or ctx.obj['file']
        try:
            ctx.obj['parser'].dump(config, target)
        except ComposeError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
        click.echo(f"{service}: {config.get_service(service).image}")


@cli.command()
@click.option('--to', '-t', 'fmt', type=click.Choice([f.value for f in ComposeFormat]), default=ComposeFormat.YAML.value)
@click.option('--out', '-o', default=None, help='Output file (defaults to stdout)')
@click.pass_context
def convert(ctx, fmt, out):
    """Re-encode the compose file in canonical form."""
    config = _require_config(ctx)
    if not config:
        return

    content = ctx.obj['parser'].save(config, fmt)
    if out:
        with open(out, 'wb') as f:
            f.write(content)
    else:
        click.echo(content.decode("utf-8"), nl=False)


@cli.command()
@click.pass_context
def order(ctx):
    """Print the service start order."""
    config = _require_config(ctx)
    if not config:
        return

    resolver = DependencyResolver()
    for name, missing in resolver.missing_dependencies(config).items():
        click.echo(f"Warning: {name} depends on undefined services: {', '.join(missing)}", err=True)
    try:
        for name in resolver.resolve_order(config):
            click.echo(name)
    except ComposeError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})

if __name__ == '__main__':
    main()
