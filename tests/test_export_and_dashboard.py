import csv
import io
from datetime import datetime

from betledger.app.services.dashboard import build_dashboard
from betledger.app.services.export import CSV_HEADERS, bets_to_csv


def test_csv_has_header_and_profit_column(bet):
    text = bets_to_csv([
        bet("won", stake=10, odds=2.5, league="NBA", betting_market="ML",
            bet_description='Lakers, "ML"', when=datetime(2026, 2, 2, 20)),
        bet("cashout", stake=10),  # malformed, still exported
    ])
    rows = list(csv.reader(io.StringIO(text)))

    assert rows[0] == CSV_HEADERS
    assert rows[1] == [
        "2026-02-02", "football", "NBA", "ML", 'Lakers, "ML"',
        "2.5", "10.00", "25.00", "won", "15.00",
    ]
    assert rows[2][-2:] == ["cashout", "0.00"]


def test_dashboard_composes_every_view(bet, movement):
    bets = [
        bet("won", stake=50, odds=2.0, when=datetime(2026, 1, 2, 20)),
        bet("pending", stake=5, when=datetime(2026, 1, 3, 10)),
        bet("lost", stake=-1),
    ]
    movements = [movement("deposit", 1000.0, when=datetime(2026, 1, 1, 9))]

    dash = build_dashboard(bets, movements, None, granularity="week")

    assert dash.stats.total_bets == 2
    assert dash.ledger[-1].balance == 1050.0
    assert dash.profit_timeline[-1].cumulative_profit == 50.0
    assert [(v.period, v.total) for v in dash.volume] == [("2025-12-28", 2)]
    assert [a.bet_id for a in dash.anomalies] == [bets[2].id]
    assert build_dashboard(bets, movements, None, granularity="week") == dash


def test_dashboard_logs_each_malformed_row_once(bet, movement, caplog):
    broken = bet("cashout", stake=10)
    bad_deposit = movement("deposit", -50.0)

    with caplog.at_level("WARNING"):
        dash = build_dashboard([bet("won"), broken], [bad_deposit], 0)

    assert sum(broken.id in r.getMessage() for r in caplog.records) == 1
    assert sum(bad_deposit.id in r.getMessage() for r in caplog.records) == 1
    assert [e.category for e in dash.ledger] == ["initial", "win"]
