"""finflow - track income and expenses, chart your last six months."""
