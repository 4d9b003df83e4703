"""
Local copy of the on-chain market hours rules.

The program decides on every crank whether the US market is open (which sets
the transfer validation) and whether the crank falls inside a reward window.
These helpers let the bot report what a crank is expected to do.
"""
SECONDS_IN_A_DAY = 86400
MARKET_OPEN_TIME = 14 * 3600 + 30 * 60   # 14:30 UTC = 9:30 EST
MARKET_CLOSE_TIME = 21 * 3600            # 21:00 UTC = 16:00 EST
MARKET_OPEN_CLOSE_MARGIN = 15 * 60
REWARD_IN_LAMPORTS = 10_000_000

REWARD_WINDOW_STARTS = (MARKET_OPEN_TIME, MARKET_CLOSE_TIME)


def seconds_since_midnight(unix_timestamp):
    return unix_timestamp % SECONDS_IN_A_DAY


def weekday(unix_timestamp):
    # 1970-01-01 was a Thursday, so 0 is Sunday
    return (unix_timestamp // SECONDS_IN_A_DAY + 4) % 7


def is_us_market_open(unix_timestamp):
    r"""Same rule as the program.

    Notes
    --
    The program treats weekdays 5 and 6 as the weekend, which with Sunday
    as 0 closes Friday and Saturday and opens Sunday. Kept as is so the
    prediction matches what a crank writes.
    """
    if weekday(unix_timestamp) >= 5:
        return False

    seconds = seconds_since_midnight(unix_timestamp)
    return MARKET_OPEN_TIME <= seconds < MARKET_CLOSE_TIME


def is_within_reward_window(unix_timestamp):
    r"""True within 15 minutes after market open or market close.

    Notes
    --
    The program does not check the weekday here, so weekend cranks inside
    the window are still paid.
    """
    seconds = seconds_since_midnight(unix_timestamp)
    return any(start <= seconds < start + MARKET_OPEN_CLOSE_MARGIN
               for start in REWARD_WINDOW_STARTS)


def expects_reward(unix_timestamp, vault_lamports):
    r"""Whether a crank at `unix_timestamp` should pay the signer.
    Arguments
    --
    unix_timestamp (int): Time the crank lands on-chain
    vault_lamports (int): Current balance of the reward vault
    """
    return (is_within_reward_window(unix_timestamp)
            and vault_lamports > REWARD_IN_LAMPORTS)


def expected_transfer_validation(unix_timestamp):
    return "Approved" if is_us_market_open(unix_timestamp) else "Rejected"


def seconds_until_reward_window(unix_timestamp):
    r"""Seconds until the next reward window opens; 0 if inside one."""
    if is_within_reward_window(unix_timestamp):
        return 0

    seconds = seconds_since_midnight(unix_timestamp)
    upcoming = [start - seconds for start in REWARD_WINDOW_STARTS
                if start > seconds]
    if len(upcoming) > 0:
        return min(upcoming)

    # Wrap around to tomorrow's open
    return SECONDS_IN_A_DAY - seconds + MARKET_OPEN_TIME
