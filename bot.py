from chat_warden import run

if __name__ == "__main__":
    run()
