import sys
import asyncio
import argparse

from solana.rpc.commitment import Confirmed, Finalized, Processed

from cranker import bot
from cranker.api import SolanaRPC
from cranker.market import expects_reward
from cranker.utils import get_time

COMMITMENTS = {
    "processed": Processed,
    "confirmed": Confirmed,
    "finalized": Finalized,
}


def preflight(url):
    r"""Warn about an unhealthy node. Never stops the run.

    Returns
    --
    current slot, or None if the node did not answer
    """
    rpc = SolanaRPC(url)
    if not rpc.check_connection():
        print(f"[warn] {url} is not healthy, continuing", file=sys.stderr)
    return rpc.get_slot()


async def report(robot, slot=None):
    r"""Print the wallet balance and the derived addresses."""
    balance = await robot.get_balance(robot.signer)
    print(f"[wallet] {robot.signer} balance={balance} slot={slot}")
    print(f"[oracle] pda={robot.oracle}")

    vault_balance = await robot.get_balance(robot.reward_vault)
    print(f"[vault] pda={robot.reward_vault} balance={vault_balance}")

    reward = expects_reward(get_time(), vault_balance)
    print(f"[vault] crank now would pay reward: {reward}")


async def main(args):
    url = bot.get_rpc_url(args.chain, args.url)
    commitment = COMMITMENTS[args.commitment]

    slot = await asyncio.to_thread(preflight, url)
    program = bot.load_program(url,
                               wallet_path=args.wallet,
                               program_id=args.program_id,
                               idl_path=args.idl,
                               commitment=commitment,
                               )
    robot = bot.CrankBot(program,
                         commitment=commitment,
                         strict_fetch=args.strict_fetch,
                         )
    try:
        await report(robot, slot)

        if args.loop:
            await robot.run(interval=args.interval,
                            reward_window_only=args.reward_window_only,
                            )
            return 0

        tx = await robot.run_once()
        return 0 if tx is not None else 1
    finally:
        await program.close()


def positive_int(value):
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def get_parser():
    parser = argparse.ArgumentParser(
        description="Create the market hours Oracle if needed and crank it.",
    )
    parser.add_argument("--chain",
                        type=str,
                        choices=list(bot.CHAIN_URLS),
                        default="local",
                        )
    parser.add_argument("--url",
                        type=str,
                        default=None,
                        help="RPC url (default: ANCHOR_PROVIDER_URL or --chain url)",
                        )
    parser.add_argument("--wallet",
                        type=str,
                        default=None,
                        help="Keypair file (default: ANCHOR_WALLET or ~/.config/solana/id.json)",
                        )
    parser.add_argument("--program-id",
                        type=str,
                        default=bot.PROGRAM_ID,
                        )
    parser.add_argument("--idl",
                        type=str,
                        default=bot.IDL_PATH,
                        )
    parser.add_argument("--commitment",
                        type=str,
                        choices=list(COMMITMENTS),
                        default="confirmed",
                        )
    parser.add_argument("--strict-fetch",
                        action="store_true",
                        default=False,
                        help="Only create the Oracle when the account is missing, "
                             "raise on other fetch errors",
                        )
    parser.add_argument("--loop",
                        action="store_true",
                        default=False,
                        help="Keep cranking every --interval seconds",
                        )
    parser.add_argument("--interval",
                        type=positive_int,
                        help="Seconds between cranks with --loop",
                        default=60,
                        )
    parser.add_argument("--reward-window-only",
                        action="store_true",
                        default=False,
                        help="With --loop, only crank inside reward windows",
                        )
    return parser


def cli(argv=None):
    args = get_parser().parse_args(argv)
    sys.exit(asyncio.run(main(args)))


if __name__ == "__main__":
    cli()
