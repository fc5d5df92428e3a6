"""Microsoft Graph access for OneDrive folder listings."""
