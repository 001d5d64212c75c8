"""Plan billing: subscription plan lifecycle, prorated invoicing and plan migration."""
