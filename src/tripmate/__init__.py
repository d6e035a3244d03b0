"""tripmate: real-time chat and presence for the travel companion platform."""
