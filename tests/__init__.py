"""Test suite for swrcache."""
