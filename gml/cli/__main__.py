"""gml CLI - Command-line interface for reading Gmail."""

import logging
import os

import click
from dotenv import load_dotenv

from gml import __version__
from gml.sdk import mail as sdk_mail
from gml.sdk.auth import OAuthAuthenticator
from gml.sdk.config import AUTH_TYPE_OAUTH
from gml.sdk.exceptions import ConfigError
from gml.sdk.mail.fields import AVAILABLE_FIELDS, DEFAULT_FIELDS
from gml.sdk.mail.messages import MAX_PAGE_SIZE
from gml.sdk.timing import Deadline

from .decorators import pass_config, report_errors
from .format import OUTPUT_FORMATS, OUTPUT_FORMAT_TEXT, render_message_detail, render_message_list


# Configure logging at the application level
if not logging.root.handlers:
    LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.WARNING),
                        format='%(asctime)s - %(levelname)s - %(message)s')
# Suppress noisy INFO logs from googleapiclient and google_auth_oauthlib
logging.getLogger('googleapiclient.discovery').setLevel(logging.WARNING)
logging.getLogger('googleapiclient.discovery_cache').setLevel(logging.WARNING)
logging.getLogger('google_auth_oauthlib.flow').setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

FORMAT_OPTION_HELP = "Output format (text or json)."
TIMEOUT_OPTION_HELP = "Abort if the command takes longer than this many seconds."


@click.group()
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), default=None,
              help='Config file (default is $HOME/.config/gml/config.yaml).')
@click.pass_context
def gml(ctx, config_path):
    """Gmail CLI client.

    List and read Gmail messages from the command line.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@click.command()
@report_errors
@pass_config
def auth(config):
    """Authenticate with Gmail API using OAuth.

    Runs the browser OAuth flow and saves the access token. Only applicable
    when auth_type is "oauth" in the config.
    """
    if config.auth_type != AUTH_TYPE_OAUTH:
        raise ConfigError(
            f"auth command is only available for OAuth authentication (current: {config.auth_type})"
        )

    if os.path.exists(config.user_credentials):
        click.echo(f"Token file already exists: {config.user_credentials}")
        if not click.confirm("Do you want to re-authenticate?", default=False):
            click.echo("Cancelled.")
            return

    authenticator = OAuthAuthenticator(config.application_credentials, config.user_credentials)
    authenticator.authenticate()
    click.echo(f"Token saved to {config.user_credentials}")
    click.secho("Authentication successful!", fg="green")


@click.command()
@click.option('-q', '--query', default="", help='Search query (Gmail search syntax).')
@click.option('-n', '--max-results', type=click.IntRange(1, MAX_PAGE_SIZE), default=10,
              show_default=True,
              help='Messages per request; all matching pages are fetched.')
@click.option('-l', '--label', 'labels', multiple=True,
              help='Filter by label name or ID (can be specified multiple times).')
@click.option('-f', '--fields', default=DEFAULT_FIELDS, show_default=True,
              help=f"Comma-separated list of fields ({','.join(AVAILABLE_FIELDS)}).")
@click.option('--format', 'output_format', type=click.Choice(OUTPUT_FORMATS),
              default=OUTPUT_FORMAT_TEXT, help=FORMAT_OPTION_HELP)
@click.option('--timeout', type=click.FloatRange(min=0, min_open=True), default=None,
              help=TIMEOUT_OPTION_HELP)
@report_errors
@pass_config
def list_command(config, query, max_results, labels, fields, output_format, timeout):
    """List Gmail messages with optional filters.

    \b
    Common labels: INBOX, SENT, DRAFT, SPAM, TRASH, STARRED, UNREAD, IMPORTANT,
                   CATEGORY_PERSONAL, CATEGORY_SOCIAL, CATEGORY_PROMOTIONS,
                   CATEGORY_UPDATES, CATEGORY_FORUMS

    \b
    Examples:
      gml list                              # List recent messages
      gml list -q "from:example@gmail.com"  # Search messages
      gml list -l INBOX -l UNREAD           # List unread messages in INBOX
      gml list -f id,from,subject,body      # Specify fields to include
      gml list --format json                # Output as JSON
    """
    deadline = Deadline(timeout)
    field_set = sdk_mail.parse_fields(fields)
    logger.debug(f"Executing mail list with query: '{query}', labels: {list(labels)}, fields: {sorted(field_set)}")

    service = sdk_mail.get_gmail_service(config)
    messages = sdk_mail.list_messages(
        service,
        field_set,
        query=query,
        labels=labels,
        max_results=max_results,
        deadline=deadline,
    )

    if not messages and output_format == OUTPUT_FORMAT_TEXT:
        click.echo("No messages found.")
        return
    render_message_list(messages, field_set, output_format)


@click.command()
@click.argument('message_id')
@click.option('--format', 'output_format', type=click.Choice(OUTPUT_FORMATS),
              default=OUTPUT_FORMAT_TEXT, help=FORMAT_OPTION_HELP)
@click.option('--timeout', type=click.FloatRange(min=0, min_open=True), default=None,
              help=TIMEOUT_OPTION_HELP)
@report_errors
@pass_config
def get_command(config, message_id, output_format, timeout):
    """Get a Gmail message by ID with full body content."""
    logger.debug(f"Executing mail get for message ID: '{message_id}'")
    service = sdk_mail.get_gmail_service(config)
    detail = sdk_mail.get_message(service, message_id, deadline=Deadline(timeout))
    render_message_detail(detail, output_format)


@click.command()
def version():
    """Show the gml version."""
    click.echo(f"gml {__version__}")


gml.add_command(auth)
gml.add_command(list_command, name='list')
gml.add_command(get_command, name='get')
gml.add_command(version)


def main():
    """Entry point for the CLI."""
    load_dotenv()
    gml()


if __name__ == "__main__":
    main()
