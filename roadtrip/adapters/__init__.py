"""Provider adapters: OpenRouteService and TollGuru clients."""
