"""
LazyAuction CLI

Entry point for voucher inspection and offline auction simulation.
"""

import json
import sys
from pathlib import Path

import click

from lazyauction.utils.logger import setup_logging


def _load_json(path: str) -> dict:
    return json.loads(Path(path).read_text())


def _parse_voucher(data: dict, where: str):
    """Build a Voucher, turning malformed input into a usage error."""
    from lazyauction.core import Voucher

    try:
        return Voucher.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise click.UsageError(f"{where}: invalid voucher ({e})")


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug):
    """LazyAuction - lazy-mint single asset auctions"""
    import logging

    level = logging.DEBUG if debug else logging.WARNING
    setup_logging(level=level)
    ctx.ensure_object(dict)


# =============================================================================
# Voucher Commands
# =============================================================================

@cli.command("verify")
@click.argument("voucher_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--issuer", required=True, help="Authorized issuer address")
@click.option("--contract", "contract_address", required=True, help="Auction contract address")
@click.option("--chain-id", default=31337, show_default=True, help="Chain identifier")
def verify(voucher_file, issuer, contract_address, chain_id):
    """Check that a voucher was signed by ISSUER for this auction"""
    from lazyauction.core import AuctionError, VoucherDomain, VoucherVerifier

    voucher = _parse_voucher(_load_json(voucher_file), voucher_file)
    verifier = VoucherVerifier(issuer, VoucherDomain(contract_address, chain_id))

    try:
        signer = verifier.verify(voucher)
    except AuctionError as e:
        click.echo(f"✗ {e.name}: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Voucher for asset {voucher.asset_id} signed by {signer}")
    click.echo(f"  URI: {voucher.metadata_uri}")
    click.echo(f"  Minimum price: {voucher.minimum_price}")


# =============================================================================
# Simulation
# =============================================================================

@cli.command("simulate")
@click.argument("scenario_file", type=click.Path(exists=True, dir_okay=False))
def simulate(scenario_file):
    """
    Replay a JSON scenario against an in-memory auction.

    The scenario holds a "config" object, a default "voucher" and a list of
    "steps", each one of: bid, advance, end, withdraw.
    """
    from lazyauction.core import (
        AccountBook,
        AssetRegistry,
        AuctionError,
        LazyMintAuction,
        ManualClock,
        load_config,
    )

    scenario = _load_json(scenario_file)
    config = load_config(**scenario.get("config", {}))
    default_voucher = _parse_voucher(scenario["voucher"], "scenario") if "voucher" in scenario else None

    clock = ManualClock(start=scenario.get("start_time", 1_700_000_000))
    registry = AssetRegistry()
    accounts = AccountBook()
    auction = LazyMintAuction.from_config(config, registry, accounts, clock=clock)
    auction.events.subscribe(lambda event: click.echo(f"    event {type(event).__name__} {_event_fields(event)}"))

    for i, step in enumerate(scenario.get("steps", [])):
        action = step["action"]
        try:
            if action == "bid":
                voucher = _parse_voucher(step["voucher"], f"Step {i}") if "voucher" in step else default_voucher
                if voucher is None:
                    raise click.UsageError(f"Step {i}: bid without a voucher")
                click.echo(f"[{i}] bid {step['participant']} {step['amount']}")
                auction.bid(step["participant"], voucher, int(step["amount"]))
            elif action == "advance":
                clock.advance(int(step["seconds"]))
                click.echo(f"[{i}] advance {step['seconds']}s (remaining={auction.time_remaining()})")
            elif action == "end":
                click.echo(f"[{i}] end")
                auction.auction_end()
            elif action == "withdraw":
                click.echo(f"[{i}] withdraw {step['participant']}")
                amount = auction.withdraw_funds_after_auction_end(step["participant"])
                click.echo(f"    paid {amount}")
            else:
                raise click.UsageError(f"Step {i}: unknown action {action!r}")
        except AuctionError as e:
            click.echo(f"    ✗ {e.name}")

    click.echo()
    click.echo("📊 Final state:")
    for key, value in auction.stats().items():
        click.echo(f"  {key}: {value}")
    for asset_id, owner in registry.owners.items():
        click.echo(f"  asset {asset_id} owner: {owner}")


def _event_fields(event) -> str:
    return " ".join(f"{k}={v}" for k, v in vars(event).items())


if __name__ == "__main__":
    cli()
