from urlstat.main import run

run()
