"""Pazireshino - study-abroad referral platform backend."""
