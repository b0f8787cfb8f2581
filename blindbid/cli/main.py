"""
BlindBid CLI - Command Line Interface for the sealed-bid auction

Main entry point for all CLI commands.
"""

import json
import logging

import click

from blindbid.utils.logger import setup_logging, get_logger


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--env-file", default=None, type=click.Path(dir_okay=False), help=".env file with BLINDBID_* settings")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, env_file):
    """BlindBid - Sealed-bid auction engine"""
    from blindbid.core.config import load_config

    try:
        config = load_config(env_file)
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}")

    level = logging.DEBUG if debug else getattr(logging, config.log_level)
    setup_logging(level=level)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# =============================================================================
# Blind Command
# =============================================================================


@cli.command("blind")
@click.argument("amount")
@click.option("--fake", is_flag=True, help="Blind a decoy bid")
@click.option("--wei", is_flag=True, help="AMOUNT is already in base units")
def blind_cmd(amount, fake, wei):
    """Print the commitment for a bid of AMOUNT"""
    from blindbid.crypto import blind, bytes_to_hex
    from blindbid.utils.units import parse_units

    try:
        value = int(amount) if wei else parse_units(amount)
        commitment = blind(value, fake)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="AMOUNT")

    click.echo(bytes_to_hex(commitment))


# =============================================================================
# Deployment Commands
# =============================================================================


@cli.command("deploy")
@click.option("--bidding-duration", type=int, default=None, help="Bidding phase length in seconds")
@click.option("--reveal-duration", type=int, default=None, help="Reveal phase length in seconds")
@click.option("--beneficiary", default=None, help="Beneficiary address (0x...)")
@click.option("--out-dir", default=None, type=click.Path(file_okay=False), help="Where to write the record")
@click.pass_context
def deploy(ctx, bidding_duration, reveal_duration, beneficiary, out_dir):
    """Create an auction and save its deployment record"""
    from dataclasses import replace
    from blindbid.core.deployment import deploy_auction, save_deployment

    config = ctx.obj["config"]
    overrides = {}
    if bidding_duration is not None:
        overrides["bidding_duration"] = bidding_duration
    if reveal_duration is not None:
        overrides["reveal_duration"] = reveal_duration
    if beneficiary is not None:
        overrides["beneficiary"] = beneficiary
    if out_dir is not None:
        overrides["deployments_dir"] = out_dir

    try:
        config = replace(config, **overrides)
        deployment = deploy_auction(config)
    except ValueError as e:
        raise click.ClickException(str(e))

    record_path = save_deployment(deployment.record, config.deployments_dir)

    click.echo(f"✓ Auction deployed to: {deployment.record.address}")
    click.echo(f"  Beneficiary: {deployment.record.beneficiary}")
    click.echo(f"  Bidding ends: {deployment.record.bidding_end}")
    click.echo(f"  Reveal ends: {deployment.record.reveal_end}")
    click.echo(f"  Saved to: {record_path}")


@cli.command("show")
@click.option("--dir", "directory", default=None, type=click.Path(file_okay=False), help="Deployment directory")
@click.pass_context
def show(ctx, directory):
    """Show a saved deployment record"""
    from pydantic import ValidationError
    from blindbid.core.deployment import load_deployment

    directory = directory or ctx.obj["config"].deployments_dir
    try:
        record = load_deployment(directory)
    except FileNotFoundError as e:
        raise click.ClickException(str(e))
    except ValidationError as e:
        raise click.ClickException(f"Corrupt deployment record: {e}")

    click.echo(json.dumps(record.model_dump(), indent=2))


# =============================================================================
# Demo Command
# =============================================================================


@cli.command("demo")
@click.option("--bidding-duration", default=60, type=int, help="Bidding phase length in seconds")
@click.option("--reveal-duration", default=60, type=int, help="Reveal phase length in seconds")
def demo(bidding_duration, reveal_duration):
    """Run a two-bidder auction on a simulated clock"""
    from blindbid.crypto import generate_keypair, bytes_to_hex
    from blindbid.core.auction import BlindAuction
    from blindbid.core.clock import ManualClock
    from blindbid.core.payments import AccountBook
    from blindbid.utils.units import parse_units, format_units

    logger = get_logger("cli")

    click.echo("=" * 60)
    click.echo("  BLINDBID - SEALED-BID AUCTION DEMO")
    click.echo("=" * 60)
    click.echo()

    clock = ManualClock(start=1_700_000_000)
    book = AccountBook()
    beneficiary = generate_keypair().address
    alice = generate_keypair().address
    bob = generate_keypair().address
    book.fund(alice, parse_units("100"))
    book.fund(bob, parse_units("100"))

    auction = BlindAuction(bidding_duration, reveal_duration, beneficiary, clock=clock, payments=book)
    click.echo(f"🏛️  Auction created, beneficiary {bytes_to_hex(beneficiary)[:12]}...")
    click.echo()

    # Bidding
    click.echo("🙈 Bidding phase")
    alice_value, alice_deposit = parse_units("5"), parse_units("8")
    bob_value, bob_deposit = parse_units("7"), parse_units("7")
    auction.place_bid(alice, alice_deposit, auction.blind(alice_value, False))
    auction.place_bid(alice, parse_units("1"), auction.blind(parse_units("9"), True))
    auction.place_bid(bob, bob_deposit, auction.blind(bob_value, False))
    click.echo("  ✓ Alice: real bid 5 (deposit 8) + decoy (deposit 1)")
    click.echo("  ✓ Bob: real bid 7 (deposit 7)")
    click.echo()

    # Reveal
    clock.increase_to(auction.bidding_end + 10)
    click.echo("🔓 Reveal phase")
    refund_alice = auction.reveal(alice, [alice_value, parse_units("9")], [False, True])
    refund_bob = auction.reveal(bob, [bob_value], [False])
    click.echo(f"  ✓ Alice credited {format_units(refund_alice)}")
    click.echo(f"  ✓ Bob credited {format_units(refund_bob)}")
    click.echo()

    # Settlement
    clock.increase_to(auction.reveal_end + 10)
    event = auction.auction_end()
    winner = "Bob" if event.winner == bob else "Alice"
    click.echo("⚖️  Auction ended")
    click.echo(f"  ✓ Winner: {winner}, paying {format_units(event.amount)}")

    paid_alice = auction.withdraw(alice)
    paid_bob = auction.withdraw(bob)
    click.echo(f"  ✓ Alice withdrew {format_units(paid_alice)}")
    click.echo(f"  ✓ Bob withdrew {format_units(paid_bob)}")
    click.echo()

    click.echo("📊 Final balances:")
    click.echo(f"  Alice: {format_units(book.balance_of(alice))}")
    click.echo(f"  Bob: {format_units(book.balance_of(bob))}")
    click.echo(f"  Beneficiary: {format_units(book.balance_of(beneficiary))}")
    click.echo(f"  Auction custody: {format_units(auction.balance)}")
    logger.debug(f"Demo stats: {auction.stats()}")
    click.echo()
    click.echo("✅ Demo complete!")


if __name__ == "__main__":
    cli()
