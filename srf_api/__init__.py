"""SRF forms backend: donation, volunteer, newsletter and contact submissions."""
