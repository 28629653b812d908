"""Each-way festival tipping."""
