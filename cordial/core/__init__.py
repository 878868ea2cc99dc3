"""Request construction building blocks."""
