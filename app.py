from ctxops import create_app

app = create_app()

if __name__ == "__main__":
    # Listen on all interfaces so the API is reachable from other devices
    app.run(host="0.0.0.0", port=app.config["PORT"], debug=True)
