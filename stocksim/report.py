"""
Console report: print market, portfolio and command outcomes.
"""

from __future__ import annotations

import pandas as pd

from stocksim.session import CommandResult, PortfolioView


def describe_profit(profit: float) -> str:
    """Profit, loss, or break-even line for a completed sale."""
    if profit > 0:
        return f"Profit: ${profit:,.2f}"
    if profit < 0:
        return f"Loss: ${profit:,.2f}"
    return "No profit or loss on this sale."


def print_market(market: pd.DataFrame) -> None:
    """Print the market table returned by TradingSession.view_market()."""
    print("Current Market Prices")
    print("---------------------")
    print(f"{'Symbol':<6} {'Name':<15} {'Price':>10}")
    for row in market.itertuples(index=False):
        print(f"{row.symbol:<6} {row.name:<15} {'$' + format(row.price, ',.2f'):>10}")


def print_portfolio(view: PortfolioView) -> None:
    """Print account summary and holdings."""
    print(f"User Portfolio: {view.owner}")
    print(f"Cash:                  ${view.cash:,.2f}")
    print(f"Total Portfolio Value: ${view.holdings_value:,.2f}")
    print(f"Account Value:         ${view.total_value:,.2f}")
    print("---------------------")
    print("Holdings:")
    if view.holdings.empty:
        print("  No stocks held.")
        return
    for row in view.holdings.itertuples(index=False):
        if pd.isna(row.price):
            print(f"  {row.symbol}: {row.quantity} shares (avg cost ${row.average_cost:,.2f}; not listed)")
            continue
        print(
            f"  {row.symbol}: {row.quantity} shares (Current value: ${row.market_value:,.2f}, "
            f"avg cost ${row.average_cost:,.2f}, unrealized ${row.unrealized_pnl:,.2f})"
        )


def print_command_result(result: CommandResult) -> None:
    """Print the outcome of a buy or sell; adds the profit line for sales."""
    print(result.message)
    if result.ok and result.profit is not None:
        print(describe_profit(result.profit))
