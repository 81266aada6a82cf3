"""
Interactive stock trading simulator: text menu driver for TradingSession.

Menu: 1 View Market, 2 View Portfolio, 3 Buy, 4 Sell, 5 Exit.
Prices drift in the background (every STOCKSIM_DRIFT_INTERVAL seconds). The
portfolio is loaded at start and saved on exit (STOCKSIM_PORTFOLIO_FILE).
"""

from __future__ import annotations

import logging

from stocksim import SimulatorConfig, TradingSession
from stocksim.persistence import LoadStatusKind
from stocksim.report import print_command_result, print_market, print_portfolio

MENU = """Stock Trading Simulator
1. View Market
2. View Portfolio
3. Buy Stock
4. Sell Stock
5. Exit"""


def read_int(prompt: str) -> int | None:
    """Lexical parse only; the session validates the value."""
    raw = input(prompt).strip()
    try:
        return int(raw)
    except ValueError:
        print("Invalid input. Please enter a number.")
        return None


def buy(session: TradingSession) -> None:
    print(f"Available stocks: {', '.join(session.market.symbols())}")
    symbol = input("Enter stock symbol to buy: ").strip().upper()
    quantity = read_int("Enter quantity to buy: ")
    if quantity is None:
        return
    print_command_result(session.buy(symbol, quantity))


def sell(session: TradingSession) -> None:
    held = session.tradeable_symbols()
    if not held:
        print("You don't own any tradeable stocks.")
        return
    print(f"Your current holdings: {', '.join(held)}")
    symbol = input("Enter stock symbol to sell: ").strip().upper()
    quantity = read_int("Enter quantity to sell: ")
    if quantity is None:
        return
    print_command_result(session.sell(symbol, quantity))


def main() -> None:
    logging.basicConfig(level=logging.WARNING, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = SimulatorConfig.from_env()
    session = TradingSession.open(config)
    status = session.load_result.status if session.load_result is not None else LoadStatusKind.ABSENT
    if status == LoadStatusKind.LOADED:
        print(f"Portfolio loaded successfully for user: {session.account.owner}")
    elif status == LoadStatusKind.ABSENT:
        print("No existing portfolio found. Creating a new one.")
    for warning in session.warnings:
        print(f"Warning: {warning}")
    session.start_market()

    try:
        while True:
            print(MENU)
            choice = read_int("Enter your choice: ")
            if choice == 1:
                print_market(session.view_market())
            elif choice == 2:
                print_portfolio(session.view_portfolio())
            elif choice == 3:
                buy(session)
            elif choice == 4:
                sell(session)
            elif choice == 5:
                break
            elif choice is not None:
                print("Invalid choice. Please try again.")
            print("\n----------------------------------\n")
    except (EOFError, KeyboardInterrupt):
        print()
    finally:
        result = session.exit()
        print(result.message if result.ok else f"Portfolio was not saved: {result.message}")
        print("Exiting. Thank you for trading!")


if __name__ == "__main__":
    main()
