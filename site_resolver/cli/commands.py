"""
CLI commands for the Company Website Resolver.
"""

import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from tqdm import tqdm

from site_resolver.core.config import (
    Config,
    SearchConfig,
    DEFAULT_CONFIG_PATH,
    API_KEY_ENV_VAR,
    SEARCH_ENGINE_ID_ENV_VAR,
)
from site_resolver.core.exceptions import ConfigurationError, SiteResolverError
from site_resolver.filtering.blacklist import DomainBlacklist, host_from_url
from site_resolver.resolution.resolver import CompanyWebsiteResolver
from site_resolver.scoring.relevance import RelevanceRanker
from site_resolver.spreadsheet.reader import SpreadsheetReader
from site_resolver.spreadsheet.writer import SpreadsheetWriter
from site_resolver.utils.logging_config import setup_logging


EXAMPLE_CONFIG = {
    'search': {
        'api_key': '${%s}' % API_KEY_ENV_VAR,
        'search_engine_id': '${%s}' % SEARCH_ENGINE_ID_ENV_VAR,
        'max_links_per_company': 4,
        'search_delay_ms': 500,
        'query_delay_ms': 1000,
        'request_timeout': 15,
        'probe_timeout': 5,
        'max_retries': 3,
        'initial_retry_delay_ms': 1000,
        'max_jitter_ms': 500,
    },
    'scoring': {
        'weights': {
            'exact_domain_guess': 500,
            'domain_contains_name': 200,
        },
    },
    'filtering': {
        'blacklist': [
            'example-aggregator.com.br',
        ],
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'file': 'logs/site_resolver.log',
    },
}


def _load_config(config_path: str) -> Optional[Config]:
    """Load the YAML config if it exists; the file is optional for most commands."""
    if not Path(config_path).exists():
        return None
    return Config(config_path)


@click.command('resolve')
@click.option('--input', '-i', 'input_path', required=True, type=click.Path(exists=True, dir_okay=False),
              help='Spreadsheet (.csv or .xlsx) with an "empresa" column')
@click.option('--output', '-o', 'output_path', required=True, type=click.Path(dir_okay=False),
              help='Output spreadsheet (.csv or .xlsx)')
@click.option('--config', '-c', 'config_path', default=DEFAULT_CONFIG_PATH, show_default=True,
              help='Path to YAML configuration file')
@click.option('--api-key', envvar=API_KEY_ENV_VAR, default=None,
              help=f'Google API key (env: {API_KEY_ENV_VAR})')
@click.option('--engine-id', envvar=SEARCH_ENGINE_ID_ENV_VAR, default=None,
              help=f'Custom Search engine ID (env: {SEARCH_ENGINE_ID_ENV_VAR})')
@click.option('--max-links', type=click.IntRange(min=1), default=None,
              help='Maximum links kept per company')
@click.option('--search-delay-ms', type=click.IntRange(min=0), default=None,
              help='Pause between companies in milliseconds')
@click.option('--overwrite', is_flag=True, help='Overwrite the output file without asking')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def resolve_command(input_path: str, output_path: str, config_path: str, api_key: Optional[str],
                    engine_id: Optional[str], max_links: Optional[int], search_delay_ms: Optional[int],
                    overwrite: bool, verbose: bool):
    """Resolve official websites for the companies in a spreadsheet."""
    try:
        config = _load_config(config_path)
        logger = setup_logging(config.logging_config if config else {})
        if verbose:
            logger.setLevel('DEBUG')
            for handler in logger.handlers:
                handler.setLevel('DEBUG')

        overrides = dict(
            api_key=api_key,
            search_engine_id=engine_id,
            max_links_per_company=max_links,
            search_delay_ms=search_delay_ms,
        )
        if config:
            search_config = config.search_config(**overrides)
        else:
            search_config = SearchConfig(api_key='', search_engine_id='').with_overrides(**overrides)

        try:
            search_config.validate()
        except ConfigurationError as e:
            click.echo(f"❌ ERROR: {e}", err=True)
            sys.exit(1)

        click.echo(f"✅ API key configured (length: {len(search_config.api_key.strip())} chars)")

        output = Path(output_path)
        if output.exists() and not overwrite:
            if not click.confirm(f"Output file {output} already exists. Overwrite?", default=False):
                click.echo("Operation cancelled by user.")
                return

        reader = SpreadsheetReader(input_path)
        records = list(reader.read_companies())
        if not records:
            click.echo("❌ Error: No valid company names found in the input file", err=True)
            sys.exit(1)

        if verbose:
            click.echo(f"Loaded {len(records)} companies from {input_path}")

        blacklist = DomainBlacklist.from_config(config.filtering_config if config else None)
        ranker = RelevanceRanker(config.scoring_weights() if config else None)
        resolver = CompanyWebsiteResolver(search_config, blacklist=blacklist, ranker=ranker)

        with tqdm(total=len(records), desc="Resolving companies", unit="company",
                  disable=not verbose) as progress_bar:
            def on_progress(current, total, outcome):
                progress_bar.set_postfix_str(outcome.company_name[:30])
                progress_bar.update(1)

            outcomes = resolver.resolve_companies(
                [record.name for record in records],
                progress_callback=on_progress,
            )

        SpreadsheetWriter(output_path).write_results(records, outcomes)

        errors = sum(1 for outcome in outcomes if outcome.is_error)
        if errors == 0:
            status_msg = click.style("✅ SUCCESS", fg="green", bold=True)
        else:
            status_msg = click.style("⚠️  PARTIAL", fg="yellow", bold=True)
        click.echo(f"{status_msg}: Resolved {len(outcomes) - errors}/{len(outcomes)} companies")
        click.echo(f"Results written to {output_path}")

    except SiteResolverError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group('blacklist')
def blacklist_commands():
    """Inspect the domain blacklist."""
    pass


@blacklist_commands.command('list')
@click.option('--config', '-c', 'config_path', default=DEFAULT_CONFIG_PATH, show_default=True)
def list_blacklist(config_path: str):
    """List blacklisted domains."""
    config = _load_config(config_path)
    blacklist = DomainBlacklist.from_config(config.filtering_config if config else None)

    click.echo("Blacklisted domains (including subdomains):")
    for domain in blacklist.domains:
        click.echo(f"  - {domain}")
    click.echo("Platform hosts (substring match):")
    for host in blacklist.platform_hosts:
        click.echo(f"  - {host}")


@blacklist_commands.command('check')
@click.argument('url')
@click.option('--config', '-c', 'config_path', default=DEFAULT_CONFIG_PATH, show_default=True)
def check_blacklist(url: str, config_path: str):
    """Check whether URL would be filtered out."""
    config = _load_config(config_path)
    blacklist = DomainBlacklist.from_config(config.filtering_config if config else None)

    if blacklist.is_blacklisted_url(url):
        click.echo(f"BLOCKED: {host_from_url(url) or url}")
    else:
        click.echo(f"ALLOWED: {host_from_url(url)}")


@click.group('config')
def config_commands():
    """Configuration management commands."""
    pass


@config_commands.command('show')
@click.option('--config', '-c', 'config_path', default=DEFAULT_CONFIG_PATH, show_default=True)
def config_show(config_path: str):
    """Show current configuration (API key masked)."""
    try:
        config = Config(config_path)
    except (FileNotFoundError, SiteResolverError) as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    config_dict = config.get_all()
    search = dict(config_dict.get('search') or {})
    if search.get('api_key'):
        search['api_key'] = str(search['api_key'])[:5] + '...'
    config_dict['search'] = search

    click.echo("Current Configuration:")
    click.echo(yaml.dump(config_dict, default_flow_style=False, sort_keys=False, allow_unicode=True))


@config_commands.command('validate')
@click.option('--config', '-c', 'config_path', default=DEFAULT_CONFIG_PATH, show_default=True)
def config_validate(config_path: str):
    """Validate configuration file."""
    try:
        Config(config_path).validate()
    except (FileNotFoundError, SiteResolverError) as e:
        click.echo(f"❌ Configuration validation failed: {e}", err=True)
        sys.exit(1)
    click.echo("✅ Configuration is valid")


@config_commands.command('example')
def config_example():
    """Show example configuration."""
    click.echo("Example Configuration:")
    click.echo(yaml.dump(EXAMPLE_CONFIG, default_flow_style=False, sort_keys=False))
    click.echo("To use this configuration:")
    click.echo(f"1. Save to {DEFAULT_CONFIG_PATH}")
    click.echo(f"2. Set {API_KEY_ENV_VAR} and {SEARCH_ENGINE_ID_ENV_VAR} environment variables")
    click.echo("3. Adjust parameters as needed")
