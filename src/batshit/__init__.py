"""Batshit or Not: idea rating backend."""
