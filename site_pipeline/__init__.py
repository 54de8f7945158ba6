"""Static site continuous delivery infrastructure."""
