from src.forms_service.app import create_production_app


app = create_production_app()
