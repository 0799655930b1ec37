from xml_combine.main import run

run()
