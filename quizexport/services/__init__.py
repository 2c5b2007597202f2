from .fetcher import FormFetcher

form_fetcher = FormFetcher()
