"""GradPath backend: grounded supervisor and graduate program recommendations."""
